"""Session state serialization.

JSON is the persisted record format: a single object mapping field name
to serialised field value, with no envelope.  YAML is offered for human
inspection only.

Classes
-------
- MalformedStateError  — raised when a document is not a valid state
- StateSerializer      — encode/decode ``SessionState`` as JSON or YAML
"""
from __future__ import annotations

from typing import Literal

import yaml
from pydantic import ValidationError

from kvsession.session.state import SessionState


class MalformedStateError(ValueError):
    """Raised when a serialised document does not describe a ``SessionState``."""

    def __init__(self, cause: str) -> None:
        self.cause = cause
        super().__init__(f"Malformed session state: {cause}")


class StateSerializer:
    """Serialize and deserialize ``SessionState`` objects."""

    # ------------------------------------------------------------------
    # JSON
    # ------------------------------------------------------------------

    def to_json(self, state: SessionState) -> str:
        """Return the compact JSON record for ``state``."""
        return state.model_dump_json()

    def from_json(self, raw: str | bytes) -> SessionState:
        """Parse a JSON record produced by ``to_json``.

        Raises
        ------
        MalformedStateError
            If ``raw`` is not a JSON object of string values.
        """
        try:
            return SessionState.model_validate_json(raw)
        except ValidationError as exc:
            raise MalformedStateError(str(exc)) from exc

    # ------------------------------------------------------------------
    # YAML
    # ------------------------------------------------------------------

    def to_yaml(self, state: SessionState) -> str:
        return yaml.dump(
            state.model_dump(), default_flow_style=False, allow_unicode=True, sort_keys=True
        )

    def from_yaml(self, raw: str) -> SessionState:
        """Parse a YAML document produced by ``to_yaml``.

        Raises
        ------
        MalformedStateError
            If ``raw`` is not valid YAML or not a mapping of strings.
        """
        try:
            data = yaml.safe_load(raw)
        except yaml.YAMLError as exc:
            raise MalformedStateError(str(exc)) from exc
        try:
            return SessionState.model_validate(data if data is not None else {})
        except ValidationError as exc:
            raise MalformedStateError(str(exc)) from exc

    # ------------------------------------------------------------------
    # Format dispatch
    # ------------------------------------------------------------------

    def serialize(
        self, state: SessionState, format: Literal["json", "yaml"] = "json"
    ) -> str:
        if format == "yaml":
            return self.to_yaml(state)
        return self.to_json(state)

    def deserialize(
        self, raw: str, format: Literal["json", "yaml"] = "json"
    ) -> SessionState:
        if format == "yaml":
            return self.from_yaml(raw)
        return self.from_json(raw)


__all__ = ["MalformedStateError", "StateSerializer"]
