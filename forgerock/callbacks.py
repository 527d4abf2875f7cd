"""Answering ForgeRock authentication callbacks

ForgeRock's authentication trees hand the client a list of typed callbacks
per round. The client must send the *exact same* structure back with each
callback's input values filled in. For example, given:

    {
        "authId": "eyJ[..]",
        "callbacks": [
            {
                "type": "NameCallback",
                "output": [{"name": "prompt", "value": "ui_locales"}],
                "input": [{"name": "IDToken1", "value": ""}]
            }
        ]
    }

the client answers with the first input's value set to its locale.

Only the callback types and prompts listed in CALLBACK_HANDLERS are
answered. Anything else aborts the attempt.
"""

import logging
from typing import Callable, Dict, Optional

from .device import generate_device_fingerprint, serialize_fingerprint
from .errors import UnansweredCallbackError, UnhandledPromptError, UnknownCallbackTypeError
from .models import AuthStep, Callback, Credentials, ValuePair

logger = logging.getLogger(__name__)

# Asks a human for a value; receives a label, returns the raw line entered
Prompter = Callable[[str], str]

# Prompt values observed in the OneAppSignIn tree
LOCALE_PROMPT = "ui_locales"
USERNAME_PROMPT = "User Name"
PASSWORD_PROMPT = "Password"
OTP_PROMPT = "One Time Password"

DEFAULT_LOCALE = "en-US"


def _is_placeholder(value) -> bool:
    return value is None or value == ""


class CallbackInterpreter:
    """Fills in callback inputs for one authentication attempt"""

    def __init__(
        self,
        credentials: Credentials,
        prompter: Prompter,
        locale: str = DEFAULT_LOCALE,
    ):
        """Initialize the interpreter

        Args:
            credentials: Username and password for this attempt
            prompter: Asks the user for a one-time passcode when required
            locale: Locale reported for "ui_locales"
        """
        self.credentials = credentials
        self.prompter = prompter
        self.locale = locale

    def interpret_step(self, step: AuthStep) -> AuthStep:
        """Answer every callback of a step, in server order

        The step is modified in place and returned for convenience.

        Raises:
            InterpretError: On the first callback that cannot be answered
        """
        for callback in step.callbacks:
            self.interpret(callback)
        return step

    def interpret(self, callback: Callback) -> None:
        """Answer a single callback

        Raises:
            UnknownCallbackTypeError: For callback types we do not support
            UnhandledPromptError: For supported types with an unexpected prompt
            UnansweredCallbackError: If an input is left without a value
        """
        handler = CALLBACK_HANDLERS.get(callback.type)
        if handler is None:
            logger.error(f"Unsupported callback type {callback.type!r}")
            raise UnknownCallbackTypeError(callback.type)

        logger.debug(f"Handling {callback.type} (id={callback.id})")
        handler(self, callback)

        for pair in callback.input:
            if _is_placeholder(pair.value):
                raise UnansweredCallbackError(
                    f"{callback.type} input {pair.name!r} was left empty",
                    callback.type,
                )

    # Handlers

    def _handle_no_op(self, callback: Callback) -> None:
        # Text output has no inputs; choices and confirmations keep their defaults
        pass

    def _handle_name(self, callback: Callback) -> None:
        prompt = self._prompt_of(callback)
        if prompt == LOCALE_PROMPT:
            self._first_input(callback).value = self.locale
        elif prompt == USERNAME_PROMPT:
            self._first_input(callback).value = self.credentials.username
        else:
            raise UnhandledPromptError(callback.type, prompt)

    def _handle_password(self, callback: Callback) -> None:
        prompt = self._prompt_of(callback)
        if prompt == PASSWORD_PROMPT:
            self._first_input(callback).value = self.credentials.password
        elif prompt == OTP_PROMPT:
            input_pair = self._first_input(callback)
            logger.info("One-time passcode requested")
            answer = self.prompter("the one-time passcode sent to you")
            input_pair.value = answer.rstrip("\r\n")
        else:
            raise UnhandledPromptError(callback.type, prompt)

    def _handle_hidden_value(self, callback: Callback) -> None:
        # Never cached: each call gets a new identifier
        fingerprint = generate_device_fingerprint()
        self._first_input(callback).value = serialize_fingerprint(fingerprint)

    # Helpers

    @staticmethod
    def _prompt_of(callback: Callback) -> Optional[str]:
        """Read the "prompt" output, falling back to the first output"""
        pair = callback.get_output("prompt")
        if pair is None and callback.output:
            pair = callback.output[0]
        if pair is None:
            raise UnansweredCallbackError(f"{callback.type} has no prompt", callback.type)
        return pair.value

    @staticmethod
    def _first_input(callback: Callback) -> ValuePair:
        if not callback.input:
            raise UnansweredCallbackError(f"{callback.type} has no input field", callback.type)
        return callback.input[0]


CALLBACK_HANDLERS: Dict[str, Callable[[CallbackInterpreter, Callback], None]] = {
    "TextOutputCallback": CallbackInterpreter._handle_no_op,
    "NameCallback": CallbackInterpreter._handle_name,
    "PasswordCallback": CallbackInterpreter._handle_password,
    "HiddenValueCallback": CallbackInterpreter._handle_hidden_value,
    "ChoiceCallback": CallbackInterpreter._handle_no_op,
    "ConfirmationCallback": CallbackInterpreter._handle_no_op,
}


def interpret_step(
    step: AuthStep,
    credentials: Credentials,
    prompter: Prompter,
    locale: str = DEFAULT_LOCALE,
) -> AuthStep:
    """Answer every callback of a step with a one-off interpreter"""
    return CallbackInterpreter(credentials, prompter, locale).interpret_step(step)


def interpret_callback(
    callback: Callback,
    credentials: Credentials,
    prompter: Prompter,
    locale: str = DEFAULT_LOCALE,
) -> None:
    CallbackInterpreter(credentials, prompter, locale).interpret(callback)
