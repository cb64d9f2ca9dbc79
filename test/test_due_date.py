from datetime import datetime, time

import pytest

from extraction.due_date import extract_due_date, extract_time_of_day


def test_today_defaults_to_nine_local(friday_morning, tz):
    assert extract_due_date("Comprar pão hoje", now=friday_morning, tz=tz) == "2025-06-13T12:00:00.000Z"


def test_tomorrow_with_time(friday_morning, tz):
    assert extract_due_date("Reunião amanhã às 14h", now=friday_morning, tz=tz) == "2025-06-14T17:00:00.000Z"
    assert extract_due_date("Ligar amanha 08:15", now=friday_morning, tz=tz) == "2025-06-14T11:15:00.000Z"


@pytest.mark.parametrize(
    "text,expected",
    [
        ("Dentista segunda", "2025-06-16T12:00:00.000Z"),
        ("Feira no sábado", "2025-06-14T12:00:00.000Z"),
        ("Feira no sabado", "2025-06-14T12:00:00.000Z"),
        ("Missa domingo", "2025-06-15T12:00:00.000Z"),
        ("Aula terça 19h30", "2025-06-17T22:30:00.000Z"),
    ],
)
def test_weekday_names(text, expected, friday_morning, tz):
    assert extract_due_date(text, now=friday_morning, tz=tz) == expected


def test_same_weekday_rolls_a_full_week(friday_morning, tz):
    assert extract_due_date("Happy hour sexta", now=friday_morning, tz=tz) == "2025-06-20T12:00:00.000Z"


def test_next_week(friday_morning, tz):
    assert extract_due_date("Entregar relatório próxima semana", now=friday_morning, tz=tz) == "2025-06-20T12:00:00.000Z"


def test_explicit_numeric_dates(friday_morning, tz):
    assert extract_due_date("Pagar IPVA 15/12", now=friday_morning, tz=tz) == "2025-12-15T12:00:00.000Z"
    assert extract_due_date("Prova 29/02/2024 às 8:30", now=friday_morning, tz=tz) == "2024-02-29T11:30:00.000Z"


@pytest.mark.parametrize("text", ["Entregar 31/11", "Festa 29/02/2025", "Algo 32/01", "Algo 10/13/2025", "Algo 00/05"])
def test_impossible_numeric_dates_give_no_due_date(text, friday_morning, tz):
    assert extract_due_date(text, now=friday_morning, tz=tz) is None


def test_day_of_month_later_this_month(friday_morning, tz):
    assert extract_due_date("Pagar conta dia 20", now=friday_morning, tz=tz) == "2025-06-20T12:00:00.000Z"


def test_day_of_month_today_rolls_once_the_day_has_started(friday_morning, tz):
    assert extract_due_date("Pagar conta dia 13", now=friday_morning, tz=tz) == "2025-07-13T12:00:00.000Z"
    afternoon = datetime(2025, 6, 13, 15, 0, tzinfo=tz)
    assert extract_due_date("Pagar conta dia 13", now=afternoon, tz=tz) == "2025-07-13T12:00:00.000Z"


def test_day_of_month_today_at_midnight_stays(tz):
    midnight = datetime(2025, 6, 13, 0, 0, tzinfo=tz)
    assert extract_due_date("Pagar conta dia 13", now=midnight, tz=tz) == "2025-06-13T12:00:00.000Z"


def test_day_of_month_already_passed(friday_morning, tz):
    assert extract_due_date("Pagar conta dia 10", now=friday_morning, tz=tz) == "2025-07-10T12:00:00.000Z"


def test_day_of_month_missing_in_current_month(friday_morning, tz):
    # June has 30 days, July has 31
    assert extract_due_date("Fechar caixa dia 31", now=friday_morning, tz=tz) == "2025-07-31T12:00:00.000Z"


def test_day_of_month_missing_in_next_month_too(tz):
    now = datetime(2025, 1, 31, 10, 0, tzinfo=tz)
    assert extract_due_date("Pagar dia 30", now=now, tz=tz) is None
    assert extract_due_date("Pagar dia 29", now=datetime(2025, 1, 30, 10, 0, tzinfo=tz), tz=tz) is None


def test_day_of_month_rolls_into_next_year(tz):
    now = datetime(2025, 12, 20, 10, 0, tzinfo=tz)
    assert extract_due_date("Pagar dia 5", now=now, tz=tz) == "2026-01-05T12:00:00.000Z"


def test_precedence_first_expression_wins(friday_morning, tz):
    # "hoje" wins over the explicit date
    assert extract_due_date("hoje ou 20/06", now=friday_morning, tz=tz) == "2025-06-13T12:00:00.000Z"


def test_no_date_expression(friday_morning, tz):
    assert extract_due_date("Comprar presente às 10h", now=friday_morning, tz=tz) is None


def test_weekday_names_are_whole_words(friday_morning, tz):
    assert extract_due_date("Limpar o quintal", now=friday_morning, tz=tz) is None


def test_time_of_day_patterns():
    assert extract_time_of_day("às 14h") == time(14, 0)
    assert extract_time_of_day("as 9:45") == time(9, 45)
    assert extract_time_of_day("às 18 horas") == time(18, 0)
    assert extract_time_of_day("reunião 16:45") == time(16, 45)
    assert extract_time_of_day("aula 19h30") == time(19, 30)
    assert extract_time_of_day("às 0h") == time(0, 0)
    assert extract_time_of_day("sem horário") is None


def test_out_of_range_time_falls_through():
    assert extract_time_of_day("às 25h") is None
    assert extract_time_of_day("às 25h, ou 10:30") == time(10, 30)


def test_out_of_range_time_uses_default(friday_morning, tz):
    assert extract_due_date("amanhã às 25h", now=friday_morning, tz=tz) == "2025-06-14T12:00:00.000Z"


def test_date_past_the_supported_range_gives_no_due_date(friday_morning, tz):
    # 23:00 at UTC-3 on 31/12/9999 is already year 10000 in UTC
    assert extract_due_date("Festa 31/12/9999 às 23h", now=friday_morning, tz=tz) is None
    assert extract_due_date("Festa 31/12/9999", now=friday_morning, tz=tz) == "9999-12-31T12:00:00.000Z"


def test_day_of_month_rolling_past_year_9999(tz):
    now = datetime(9999, 12, 20, 10, 0, tzinfo=tz)
    assert extract_due_date("Pagar dia 5", now=now, tz=tz) is None
