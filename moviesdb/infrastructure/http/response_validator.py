"""Parses response bodies into Envelopes.

A body is either a success envelope (`results` plus optional `page`, `next`,
`entries`) or an error envelope (`error` with `code`, `message`, `details`),
never both. Anything else is a MalformedResponseError. Items are only checked
for their identifying field; every other field is passed through as sent.
"""

import json
import logging
from typing import Any, Mapping, Optional

from moviesdb.domain.models.endpoints import EndpointDescriptor, ResultShape
from moviesdb.domain.models.envelope import Envelope
from moviesdb.domain.models.errors import MalformedResponseError, ProviderApiError

logger = logging.getLogger(__name__)


class ResponseValidator:
    """Structural validator for the movies API envelopes."""

    def parse(
        self,
        raw_body: str,
        descriptor: Optional[EndpointDescriptor] = None,
        status_code: Optional[int] = None,
    ) -> Envelope:
        """Parses a raw body.

        Args:
            raw_body: Response text as received.
            descriptor: Endpoint the body belongs to; enables result shape checks.
            status_code: HTTP status, attached to raised errors.

        Returns:
            The validated success Envelope.

        Raises:
            ProviderApiError: The body is an error envelope.
            MalformedResponseError: The body matches neither envelope shape.
        """
        payload = self._decode(raw_body, status_code)

        has_results = "results" in payload
        has_error = "error" in payload
        if has_results and has_error:
            raise self._malformed("body carries both 'results' and 'error'", raw_body, status_code)
        if has_error:
            raise self._provider_error(payload["error"], raw_body, status_code)
        if not has_results:
            raise self._malformed("body carries neither 'results' nor 'error'", raw_body, status_code)

        page = self._optional_int(payload, "page", raw_body, status_code)
        entries = self._optional_int(payload, "entries", raw_body, status_code)
        next_cursor = payload.get("next")
        if next_cursor is not None and not isinstance(next_cursor, str):
            raise self._malformed("'next' must be a string when present", raw_body, status_code)

        results = payload["results"]
        if descriptor is not None:
            self._check_results(results, descriptor, raw_body, status_code)

        return Envelope(results=results, page=page, next=next_cursor, entries=entries)

    # --- Helpers ---

    def _decode(self, raw_body: str, status_code: Optional[int]) -> Mapping[str, Any]:
        try:
            payload = json.loads(raw_body)
        except (TypeError, ValueError) as e:
            raise self._malformed(f"body is not valid JSON ({e})", raw_body, status_code) from e
        if not isinstance(payload, dict):
            raise self._malformed("body is not a JSON object", raw_body, status_code)
        return payload

    def _provider_error(self, error: Any, raw_body: str, status_code: Optional[int]) -> Exception:
        if not isinstance(error, dict):
            return self._malformed("'error' must be an object", raw_body, status_code)
        code = error.get("code")
        message = error.get("message")
        if not isinstance(code, str) or not isinstance(message, str):
            return self._malformed("'error' must carry string 'code' and 'message'", raw_body, status_code)
        details = error.get("details")
        logger.debug(f"Provider error envelope: {code}")
        return ProviderApiError(
            code=code,
            message=message,
            details=details if isinstance(details, str) else None,
            status_code=status_code,
            body=raw_body,
        )

    def _optional_int(
        self, payload: Mapping[str, Any], key: str, raw_body: str, status_code: Optional[int]
    ) -> Optional[int]:
        value = payload.get(key)
        if value is None:
            return None
        # bool is an int subclass
        if isinstance(value, bool) or not isinstance(value, int):
            raise self._malformed(f"'{key}' must be an integer when present", raw_body, status_code)
        return value

    def _check_results(
        self, results: Any, descriptor: EndpointDescriptor, raw_body: str, status_code: Optional[int]
    ) -> None:
        shape = descriptor.result_shape
        if shape is ResultShape.ANY:
            return
        if shape is ResultShape.OBJECT:
            if results is None:
                return
            if not isinstance(results, dict):
                raise self._malformed("'results' must be an object", raw_body, status_code)
            self._check_id(results, descriptor, raw_body, status_code)
            return

        if not isinstance(results, list):
            raise self._malformed("'results' must be a list", raw_body, status_code)
        if shape is ResultShape.VALUES:
            for value in results:
                if isinstance(value, (dict, list)):
                    raise self._malformed("'results' must hold plain values", raw_body, status_code)
            return
        for item in results:
            if not isinstance(item, dict):
                raise self._malformed("every result item must be an object", raw_body, status_code)
            self._check_id(item, descriptor, raw_body, status_code)

    def _check_id(
        self, item: Mapping[str, Any], descriptor: EndpointDescriptor, raw_body: str, status_code: Optional[int]
    ) -> None:
        id_field = descriptor.id_field
        if id_field is not None and item.get(id_field) in (None, ""):
            raise self._malformed(f"result item without '{id_field}'", raw_body, status_code)

    @staticmethod
    def _malformed(reason: str, raw_body: str, status_code: Optional[int]) -> MalformedResponseError:
        return MalformedResponseError(f"Malformed response: {reason}", status_code=status_code, body=raw_body)
