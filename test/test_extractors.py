import pytest

from extraction.duration import extract_duration
from extraction.priority import extract_priority
from extraction.recurrence import extract_recurrence
from extraction.title import extract_title


@pytest.mark.parametrize(
    "text",
    [
        "Reunião urgente amanhã",
        "Tarefa importante",
        "Projeto crítico",
        "Entregar documento, alta prioridade",
        "Fazer isso logo!!",
        "Comprar pão hoje",
        "Ligar ASAP",
    ],
)
def test_high_priority(text):
    assert extract_priority(text) == "high"


def test_priority_is_case_insensitive():
    assert extract_priority("URGENTE") == extract_priority("urgente") == "high"


@pytest.mark.parametrize(
    "text",
    [
        "Organizar gaveta, baixa prioridade",
        "Ler livro quando possível",
        "Arrumar quarto sem pressa",
        "Eventualmente revisar código",
    ],
)
def test_low_priority(text):
    assert extract_priority(text) == "low"


def test_high_beats_low():
    assert extract_priority("sem pressa, mas importante") == "high"


def test_medium_by_default():
    assert extract_priority("Fazer reunião amanhã") == "medium"


def test_duration_sums_independent_matches():
    assert extract_duration("1 hora e 30 minutos") == 90


@pytest.mark.parametrize(
    "text,minutes",
    [
        ("Estudar 2 horas", 120),
        ("Estudar 2h", 120),
        ("Revisar 45 min", 45),
        ("Escrever 2 pomodoros", 50),
        ("1 hora e 1 pomodoro", 85),
        ("Fazer review 20 minutos", 20),
    ],
)
def test_duration_patterns(text, minutes):
    assert extract_duration(text) == minutes


@pytest.mark.parametrize(
    "text,minutes",
    [
        ("Reunião com equipe", 60),
        ("Meeting with design", 60),
        ("Ligação para o banco", 30),
        ("Responder email do João", 15),
        ("Revisão do contrato", 30),
    ],
)
def test_duration_falls_back_to_task_type(text, minutes):
    assert extract_duration(text) == minutes


def test_duration_none_without_signal():
    assert extract_duration("Comprar presente") is None


def test_time_of_day_is_not_a_duration():
    assert extract_duration("Reunião urgente amanhã às 14h, 2 horas") == 120
    assert extract_duration("Dentista às 15h") is None


@pytest.mark.parametrize(
    "text,pattern",
    [
        ("Exercício todo dia", "daily"),
        ("Meditação diariamente", "daily"),
        ("Tarefa diário", "daily"),
        ("Standup dias úteis", "weekdays"),
        ("Check-in de segunda a sexta", "weekdays"),
        ("Standup todos os dias úteis", "weekdays"),
        ("Reunião toda semana", "weekly"),
        ("Limpar casa semanalmente", "weekly"),
        ("Academia toda segunda", "weekly"),
        ("Feira todo sábado", "weekly"),
        ("Pagar aluguel todo mês", "monthly"),
        ("Relatório mensal", "monthly"),
    ],
)
def test_recurrence_detection(text, pattern):
    assert extract_recurrence(text) == (True, pattern)


def test_no_recurrence():
    assert extract_recurrence("Comprar presente") == (False, None)


def test_title_strips_priority_keywords():
    assert extract_title("Reunião urgente com cliente") == "Reunião com cliente"


def test_title_strips_duration():
    assert extract_title("Tarefa de 2 horas") == "Tarefa de"


def test_title_strips_recurrence():
    assert extract_title("Exercício todo dia") == "Exercício"
    assert extract_title("Standup todos os dias úteis") == "Standup"


def test_title_strips_dates_and_times():
    title = extract_title("Reunião urgente hoje às 14h sobre projeto")
    assert title == "Reunião sobre projeto"
    assert extract_title("Pagar boleto 15/12/2025 16:30") == "Pagar boleto"
    assert extract_title("Pagar conta dia 15") == "Pagar conta"


def test_title_full_sentence():
    title = extract_title("Reunião urgente amanhã às 14h, 2 horas")
    assert title == "Reunião"


def test_title_capitalized():
    assert extract_title("comprar leite") == "Comprar leite"


def test_title_falls_back_to_raw_text():
    assert extract_title("hoje!!") == "hoje!!"
    text = "urgente " * 10
    assert extract_title(text) == text[:50] + "..."
