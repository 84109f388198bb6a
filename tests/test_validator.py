from services.validator import Validator


def test_valid_reminder_input():
    assert Validator.validate_reminder_input({'medicine_id': 3, 'time': '21:15'}) == []


def test_missing_medicine():
    errors = Validator.validate_reminder_input({'time': '09:00'})
    assert errors == ["Please select a medicine from the suggestions."]


def test_bad_time_and_id():
    errors = Validator.validate_reminder_input({'medicine_id': 'abc', 'time': '25:99'})
    assert len(errors) == 2


def test_query_required():
    assert Validator.validate_query(None)
    assert Validator.validate_query("") is None
