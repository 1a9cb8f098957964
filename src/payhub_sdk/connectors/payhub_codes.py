"""PayHub result code tables.

The tables are read-only views built at import time. Lookups on an unknown
code return ``None`` so callers can pass the raw code through.
"""

from types import MappingProxyType
from typing import Mapping, Optional

from .base import StandardErrorCode

CVV_CODE_TRANSLATOR: Mapping[str, str] = MappingProxyType({
    "M": "CVV matches",
    "N": "CVV does not match",
    "P": "CVV not processed",
    "S": "CVV should have been present",
    "U": "CVV request unable to be processed by issuer",
})

AVS_CODE_TRANSLATOR: Mapping[str, str] = MappingProxyType({
    "0": "Approved, Address verification was not requested.",
    "A": "Approved, Address matches only.",
    "B": "Address Match. Street Address match for international transaction Postal Code not verified "
         "because of incompatible formats (Acquirer sent both street address and Postal Code)",
    "C": "Serv Unavailable. Street address and Postal Code not verified for international transaction "
         "because of incompatible formats (Acquirer sent both street and Postal Code).",
    "D": "Exact Match, Street Address and Postal Code match for international transaction.",
    "F": "Exact Match, Street Address and Postal Code match. Applies to UK only.",
    "G": "Ver Unavailable, Non-U.S. Issuer does not participate.",
    "I": "Ver Unavailable, Address information not verified for international transaction",
    "M": "Exact Match, Street Address and Postal Code match for international transaction",
    "N": "No - Address and ZIP Code does not match",
    "P": "Zip Match, Postal Codes match for international transaction Street address not verified "
         "because of incompatible formats (Acquirer sent both street address and Postal Code).",
    "R": "Retry - Issuer system unavailable",
    "S": "Serv Unavailable, Service not supported",
    "U": "Ver Unavailable, Address unavailable.",
    "W": "ZIP match - Nine character numeric ZIP match only.",
    "X": "Exact match, Address and nine-character ZIP match.",
    "Y": "Exact Match, Address and five character ZIP match.",
    "Z": "Zip Match, Five character numeric ZIP match only.",
    "1": "Cardholder name and ZIP match AMEX only.",
    "2": "Cardholder name, address, and ZIP match AMEX only.",
    "3": "Cardholder name and address match AMEX only.",
    "4": "Cardholder name match AMEX only.",
    "5": "Cardholder name incorrect, ZIP match AMEX only.",
    "6": "Cardholder name incorrect, address and ZIP match AMEX only.",
    "7": "Cardholder name incorrect, address match AMEX only.",
    "8": "Cardholder, all do not match AMEX only.",
})

STANDARD_ERROR_CODE_MAPPING: Mapping[str, StandardErrorCode] = MappingProxyType({
    "14": StandardErrorCode.INVALID_NUMBER,
    "80": StandardErrorCode.INVALID_EXPIRY_DATE,
    "82": StandardErrorCode.INVALID_CVC,
    "54": StandardErrorCode.EXPIRED_CARD,
    "51": StandardErrorCode.CARD_DECLINED,
    "05": StandardErrorCode.CARD_DECLINED,
    "61": StandardErrorCode.CARD_DECLINED,
    "62": StandardErrorCode.CARD_DECLINED,
    "65": StandardErrorCode.CARD_DECLINED,
    "93": StandardErrorCode.CARD_DECLINED,
    "01": StandardErrorCode.CALL_ISSUER,
    "02": StandardErrorCode.CALL_ISSUER,
    "04": StandardErrorCode.PICKUP_CARD,
    "07": StandardErrorCode.PICKUP_CARD,
    "41": StandardErrorCode.PICKUP_CARD,
    "43": StandardErrorCode.PICKUP_CARD,
})


def cvv_message(code: Optional[str]) -> Optional[str]:
    """Human-readable meaning of a VERIFICATION_RESULT_CODE, or None."""
    if code is None:
        return None
    return CVV_CODE_TRANSLATOR.get(code)


def avs_message(code: Optional[str]) -> Optional[str]:
    """Human-readable meaning of an AVS_RESULT_CODE, or None."""
    if code is None:
        return None
    return AVS_CODE_TRANSLATOR.get(code)


def standard_error_code(response_code: Optional[str]) -> Optional[StandardErrorCode]:
    """Map a PayHub RESPONSE_CODE onto the standard taxonomy; unmapped codes give None."""
    if response_code is None:
        return None
    return STANDARD_ERROR_CODE_MAPPING.get(response_code)
