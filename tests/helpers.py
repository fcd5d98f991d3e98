from covstat.models import RawRecord


def raw(country, date_rep, cases, deaths, pop=1000.0):
    return RawRecord(date_rep=date_rep, cases=cases, deaths=deaths, country=country, population=pop)


def sample_raw():
    return [
        raw("France", "01/01/2020", 10, 1, 2000),
        raw("Germany", "01/01/2020", 4, 0, 4000),
        raw("France", "02/01/2020", 6, 2, 2000),
        raw("Francelandia", "02/01/2020", 3, 0, 0),
        raw("Germany", "03/01/2020", 8, 4, 4000),
        raw("United_States_of_America", "03/01/2020", 20, 5, 10000),
    ]
