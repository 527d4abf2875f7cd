import json

import pytest

from conftest import ScriptedPrompter
from forgerock.callbacks import CallbackInterpreter, interpret_callback, interpret_step
from forgerock.device import DEVICE_PROFILE
from forgerock.errors import UnansweredCallbackError, UnhandledPromptError, UnknownCallbackTypeError
from forgerock.models import AuthStep, Callback, Credentials


def _callback(callback_type, prompt=None, input_value="", callback_id=None):
    data = {
        "type": callback_type,
        "output": [{"name": "prompt", "value": prompt}] if prompt is not None else [],
        "input": [{"name": "IDToken1", "value": input_value}],
    }
    if callback_id is not None:
        data["_id"] = callback_id
    return Callback.from_dict(data)


@pytest.fixture
def credentials():
    return Credentials(username="Driver.Name+1@example.com", password="p@ss wörd")


@pytest.fixture
def interpreter(credentials, prompter):
    return CallbackInterpreter(credentials, prompter, locale="en-US")


def test_name_callback_sets_username_exactly(interpreter, credentials):
    callback = _callback("NameCallback", "User Name")

    interpreter.interpret(callback)

    assert callback.input[0].value == credentials.username


def test_name_callback_sets_locale(credentials, prompter):
    callback = _callback("NameCallback", "ui_locales")

    CallbackInterpreter(credentials, prompter, locale="fr-CA").interpret(callback)

    assert callback.input[0].value == "fr-CA"


def test_name_callback_with_unknown_prompt_is_not_guessed(interpreter):
    callback = _callback("NameCallback", "Email Address")

    with pytest.raises(UnhandledPromptError) as excinfo:
        interpreter.interpret(callback)

    assert excinfo.value.prompt == "Email Address"
    assert callback.input[0].value == ""


def test_password_callback_sets_password(interpreter, credentials):
    callback = _callback("PasswordCallback", "Password")

    interpreter.interpret(callback)

    assert callback.input[0].value == credentials.password


def test_one_time_password_asks_the_user_and_strips_newline(credentials):
    prompter = ScriptedPrompter({"passcode": "654321\n"})
    callback = _callback("PasswordCallback", "One Time Password")

    CallbackInterpreter(credentials, prompter).interpret(callback)

    assert callback.input[0].value == "654321"
    assert len(prompter.asked) == 1


def test_one_time_password_strips_windows_line_ending(credentials):
    prompter = ScriptedPrompter({"passcode": "654321\r\n"})
    callback = _callback("PasswordCallback", "One Time Password")

    CallbackInterpreter(credentials, prompter).interpret(callback)

    assert callback.input[0].value == "654321"


def test_password_callback_with_unknown_prompt(interpreter):
    with pytest.raises(UnhandledPromptError):
        interpreter.interpret(_callback("PasswordCallback", "PIN"))


def test_hidden_value_fingerprints_differ_but_fixed_fields_match(interpreter):
    first = _callback("HiddenValueCallback", "devicePrint")
    second = _callback("HiddenValueCallback", "devicePrint")

    interpreter.interpret(first)
    interpreter.interpret(second)

    first_print = json.loads(first.input[0].value)
    second_print = json.loads(second.input[0].value)

    assert first_print["identifier"] != second_print["identifier"]
    for key, value in DEVICE_PROFILE.items():
        assert first_print[key] == value
        assert second_print[key] == value


@pytest.mark.parametrize("callback_type", ["TextOutputCallback", "ChoiceCallback", "ConfirmationCallback"])
def test_passive_callbacks_are_left_untouched(interpreter, callback_type):
    callback = Callback.from_dict({
        "type": callback_type,
        "output": [{"name": "options", "value": ["Yes", "No"]}, {"name": "defaultOption", "value": 0}],
        "input": [{"name": "IDToken3", "value": 0}] if callback_type != "TextOutputCallback" else [],
    })
    before = callback.to_dict()

    interpreter.interpret(callback)

    assert callback.to_dict() == before


def test_unknown_callback_type_is_fatal(interpreter):
    with pytest.raises(UnknownCallbackTypeError) as excinfo:
        interpreter.interpret(_callback("KbaCreateCallback", "Question"))

    assert excinfo.value.callback_type == "KbaCreateCallback"


def test_name_callback_without_input_field(interpreter):
    callback = Callback.from_dict({
        "type": "NameCallback",
        "output": [{"name": "prompt", "value": "User Name"}],
        "input": [],
    })

    with pytest.raises(UnansweredCallbackError):
        interpreter.interpret(callback)


def test_empty_default_choice_is_not_sent(interpreter):
    with pytest.raises(UnansweredCallbackError):
        interpreter.interpret(_callback("ChoiceCallback", "Pick one", input_value=""))


def test_prompt_falls_back_to_first_output(interpreter, credentials):
    callback = Callback.from_dict({
        "type": "NameCallback",
        "output": [{"name": "label", "value": "User Name"}],
        "input": [{"name": "IDToken1", "value": ""}],
    })

    interpreter.interpret(callback)

    assert callback.input[0].value == credentials.username


def test_interpret_step_answers_every_callback_in_order(credentials, prompter):
    step = AuthStep.from_dict({
        "authId": "auth-1",
        "callbacks": [
            {"type": "NameCallback", "output": [{"name": "prompt", "value": "User Name"}],
             "input": [{"name": "IDToken1", "value": ""}], "_id": 0},
            {"type": "PasswordCallback", "output": [{"name": "prompt", "value": "Password"}],
             "input": [{"name": "IDToken2", "value": ""}], "_id": 1},
        ],
    })

    interpret_step(step, credentials, prompter)

    payload = step.to_dict()
    assert [cb["_id"] for cb in payload["callbacks"]] == [0, 1]
    assert payload["callbacks"][0]["input"][0]["value"] == credentials.username
    assert payload["callbacks"][1]["input"][0]["value"] == credentials.password


def test_interpret_step_stops_at_first_error(credentials, prompter):
    step = AuthStep.from_dict({
        "authId": "auth-1",
        "callbacks": [
            {"type": "MysteryCallback", "output": [], "input": [{"name": "IDToken1", "value": ""}]},
            {"type": "NameCallback", "output": [{"name": "prompt", "value": "User Name"}],
             "input": [{"name": "IDToken2", "value": ""}]},
        ],
    })

    with pytest.raises(UnknownCallbackTypeError):
        interpret_step(step, credentials, prompter)

    assert step.callbacks[1].input[0].value == ""


def test_interpret_callback_function(credentials, prompter):
    callback = _callback("NameCallback", "ui_locales")

    interpret_callback(callback, credentials, prompter)

    assert callback.input[0].value == "en-US"
