"""Interpretation of PayHub response bodies into PaymentResult objects."""

import json
import logging
from typing import Any, Callable, Dict, Literal, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .base import PaymentResult
from .payhub_codes import avs_message, cvv_message, standard_error_code

logger = logging.getLogger(__name__)

INVALID_RESPONSE_MESSAGE = (
    "Invalid response received from the Payhub API.  Please contact wecare@payhub.com "
    "if you continue to receive this message."
    "  (The raw response returned by the API was {raw})"
)


class ProcessorResponse(BaseModel):
    """A well-formed PayHub response object."""
    kind: Literal["processor"] = "processor"
    response_code: Optional[str] = Field(None, alias="RESPONSE_CODE")
    response_text: Optional[str] = Field(None, alias="RESPONSE_TEXT")
    avs_result_code: Optional[str] = Field(None, alias="AVS_RESULT_CODE")
    verification_result_code: Optional[str] = Field(None, alias="VERIFICATION_RESULT_CODE")
    transaction_id: Optional[str] = Field(None, alias="TRANSACTION_ID")
    raw: Dict[str, Any] = Field(default_factory=dict, exclude=True)

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    @field_validator(
        "response_code",
        "response_text",
        "avs_result_code",
        "verification_result_code",
        "transaction_id",
        mode="before",
    )
    @classmethod
    def _scalar_to_str(cls, v):
        # PayHub is not consistent about quoting codes and ids
        if v is None or isinstance(v, str):
            return v
        if isinstance(v, (int, float)) and not isinstance(v, bool):
            return str(v)
        return None

    @classmethod
    def from_body(cls, data: Dict[str, Any]) -> "ProcessorResponse":
        return cls(
            RESPONSE_CODE=data.get("RESPONSE_CODE"),
            RESPONSE_TEXT=data.get("RESPONSE_TEXT"),
            AVS_RESULT_CODE=data.get("AVS_RESULT_CODE"),
            VERIFICATION_RESULT_CODE=data.get("VERIFICATION_RESULT_CODE"),
            TRANSACTION_ID=data.get("TRANSACTION_ID"),
            raw=data,
        )


class DiagnosticError(BaseModel):
    """Stand-in for a response body that could not be decoded."""
    kind: Literal["diagnostic"] = "diagnostic"
    error_message: str

    model_config = ConfigDict(frozen=True)


DecodedResponse = Union[ProcessorResponse, DiagnosticError]


def json_error(raw_body: Optional[str]) -> DiagnosticError:
    return DiagnosticError(error_message=INVALID_RESPONSE_MESSAGE.format(raw=json.dumps(raw_body)))


def decode_response(raw_body: Optional[str]) -> DecodedResponse:
    """Decode a raw body, falling back to a DiagnosticError when it is not a JSON object."""
    try:
        data = json.loads(raw_body)
    except (TypeError, ValueError):
        logger.warning("Undecodable response body received from PayHub")
        return json_error(raw_body)
    if not isinstance(data, dict):
        logger.warning(f"Unexpected {type(data).__name__} response body received from PayHub")
        return json_error(raw_body)
    return ProcessorResponse.from_body(data)


def _response_text(decoded: DecodedResponse) -> Optional[str]:
    return decoded.response_text if isinstance(decoded, ProcessorResponse) else None


def _response_code(decoded: DecodedResponse) -> Optional[str]:
    return decoded.response_code if isinstance(decoded, ProcessorResponse) else None


def _error_message(decoded: DecodedResponse) -> Optional[str]:
    return decoded.error_message if isinstance(decoded, DiagnosticError) else None


# evaluated in order, first non-None wins
MESSAGE_SOURCES: Tuple[Callable[[DecodedResponse], Optional[str]], ...] = (
    _response_text,
    _response_code,
    _error_message,
)


def response_message(decoded: DecodedResponse) -> Optional[str]:
    for source in MESSAGE_SOURCES:
        message = source(decoded)
        if message is not None:
            return message
    return None


def build_result(decoded: DecodedResponse, success: bool, test: bool = False) -> PaymentResult:
    if isinstance(decoded, DiagnosticError):
        return PaymentResult(
            success=False,
            message=response_message(decoded),
            test=test,
            raw_response={"error_message": decoded.error_message},
        )

    error_code = None if success else standard_error_code(decoded.response_code)
    if not success:
        logger.info(
            f"PayHub request failed with response code {decoded.response_code} "
            f"(normalized: {error_code.value if error_code else None})"
        )
    return PaymentResult(
        success=success,
        message=response_message(decoded),
        avs_code=decoded.avs_result_code,
        avs_message=avs_message(decoded.avs_result_code),
        cvv_code=decoded.verification_result_code,
        cvv_message=cvv_message(decoded.verification_result_code),
        error_code=error_code,
        transaction_id=decoded.transaction_id,
        test=test,
        raw_response=decoded.raw,
    )


def interpret(raw_body: Optional[str], transport_succeeded: bool, test: bool = False) -> PaymentResult:
    """
    Turn a transport outcome into a PaymentResult.

    Args:
        raw_body: The response body as returned by the transport.
        transport_succeeded: True for a 2xx answer, False when the transport
            reported an error status that still carried a body.
        test: Whether the connector is running in demo mode.

    Returns:
        PaymentResult. ``success`` is only true when the transport succeeded
        and the body decoded into a processor response.
    """
    decoded = decode_response(raw_body)
    return build_result(decoded, success=transport_succeeded, test=test)
