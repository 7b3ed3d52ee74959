# backend-fastapi/services/password_entry_service.py
"""
Password Entry Service

Drives the two-phase PKCS#12 password flow on top of ParsePipeline:

1. parse the file; encrypted bundles come back as AWAITING_PASSWORD
2. ask the prompt collaborator once and resume with its answer

The prompt is a plain synchronous callable (message -> answer or None), so
the same service works for a terminal prompt, a test double, or anything
else that can answer a question. It is never invoked more than once per
file.
"""

import logging
from enum import Enum
from typing import Callable, Optional, Tuple

from certimport import ParseOutcome, ParsePipeline, SelectedFile

logger = logging.getLogger(__name__)

DEFAULT_PASSWORD_PROMPT = "Enter certificate password (leave blank if none):"

PasswordPrompt = Callable[[str], Optional[str]]


class PasswordResult(Enum):
    """How the password exchange went for one file"""
    NO_PASSWORD_NEEDED = "no_password_needed"
    SUCCESS = "success"
    WRONG_PASSWORD = "wrong_password"
    NOT_APPLICABLE = "not_applicable"


class PasswordEntryService:
    """Runs a parse and, when needed, the single password retry"""

    def __init__(self, pipeline: Optional[ParsePipeline] = None,
                 prompt_message: str = DEFAULT_PASSWORD_PROMPT):
        self.pipeline = pipeline or ParsePipeline()
        self.prompt_message = prompt_message
        logger.debug("Password Entry Service initialized")

    def import_file(self, selected: SelectedFile, prompt: PasswordPrompt) -> ParseOutcome:
        """Parse a selected file, prompting at most once for a password"""
        outcome, password_result = self.import_file_with_status(selected, prompt)
        logger.debug(f"Password exchange for {selected.filename}: {password_result.value}")
        return outcome

    def import_file_with_status(self, selected: SelectedFile,
                                prompt: PasswordPrompt) -> Tuple[ParseOutcome, PasswordResult]:
        outcome = self.pipeline.process(selected)
        return self._complete(outcome, prompt)

    def _complete(self, outcome: ParseOutcome,
                  prompt: PasswordPrompt) -> Tuple[ParseOutcome, PasswordResult]:
        if not outcome.requires_password:
            if outcome.ok:
                return outcome, PasswordResult.NO_PASSWORD_NEEDED
            return outcome, PasswordResult.NOT_APPLICABLE

        pending = outcome.pending
        logger.info(f"Prompting for password: {pending.filename}")
        answer = prompt(self.prompt_message)
        logger.debug(f"Password provided: {'YES' if answer else 'NO'}")

        resumed = self.pipeline.resume(pending, answer or "")
        if resumed.ok:
            return resumed, PasswordResult.SUCCESS
        return resumed, PasswordResult.WRONG_PASSWORD
