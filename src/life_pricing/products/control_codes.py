"""
Control-Code Resolver.

Maps (product, gender, smoking status, term, rider kind) to the codes the
rate store is keyed by:

- *control-code key*: gender + smoker flag + term + family suffix,
  e.g. ``MN``, ``MY10``, ``FN20_ST``, ``MY_WSP``, ``MN_PC_G``
- *plan code*: the rate-store plan for that key, e.g. ``54015``
- *control code*: the plan code, except legacy term above the first
  face-amount band, with rider suffixes applied for rider pricing

Every lookup is table-driven. An unmapped combination raises
ConfigurationError immediately; there are no silent defaults.
"""

import logging

from life_pricing.config.settings import SETTINGS
from life_pricing.data.schemas import (
    Gender,
    ProductType,
    RiderKind,
    SmokingStatus,
)

logger = logging.getLogger(__name__)


class ConfigurationError(Exception):
    """Raised when a product/gender/risk combination has no code mapping."""

    pass


# =============================================================================
# Key Construction
# =============================================================================

#: Family suffix appended to the control-code key
FAMILY_SUFFIXES: dict[ProductType, str] = {
    ProductType.PWL: "",
    ProductType.LT10: "",
    ProductType.LT20: "",
    ProductType.LT30: "",
    ProductType.ST10: "_ST",
    ProductType.ST15: "_ST",
    ProductType.ST20: "_ST",
    ProductType.ST30: "_ST",
    ProductType.WSP_PART: "_WSP",
    ProductType.WSP_TERM: "_WSP",
    ProductType.PC_LEVEL: "_PC_L",
    ProductType.PC_GRADED: "_PC_G",
}

#: Smoker flag as spelled in control-code keys
SMOKER_FLAGS: dict[SmokingStatus, str] = {
    SmokingStatus.NON_SMOKER: "N",
    SmokingStatus.SMOKER: "Y",
}

#: Genders with rate tables of their own
KEYED_GENDERS = (Gender.MALE, Gender.FEMALE)


def control_code_key(
    product_type: ProductType,
    gender: Gender,
    smoking_status: SmokingStatus,
) -> str:
    """
    Build the control-code key for a product.

    Parameters
    ----------
    product_type : ProductType
        Product being quoted
    gender : Gender
        MALE or FEMALE
    smoking_status : SmokingStatus
        Risk class

    Returns
    -------
    str
        Key such as ``MN``, ``MY10`` or ``FN20_ST``

    Raises
    ------
    ConfigurationError
        If the product has no key family or the gender is not keyed

    Examples
    --------
    >>> control_code_key(ProductType.ST20, Gender.FEMALE, SmokingStatus.NON_SMOKER)
    'FN20_ST'
    """
    if product_type not in FAMILY_SUFFIXES:
        raise ConfigurationError(
            f"CRITICAL: No control-code family for product {product_type.value}"
        )
    if gender not in KEYED_GENDERS:
        raise ConfigurationError(
            f"CRITICAL: No control code for gender {gender.value}; "
            f"rate tables are keyed by M or F"
        )
    term = product_type.term_years or ""
    return (
        f"{gender.value}{SMOKER_FLAGS[smoking_status]}{term}"
        f"{FAMILY_SUFFIXES[product_type]}"
    )


# =============================================================================
# Plan Codes
# =============================================================================

#: Control-code key -> plan code. For whole life, select term, worksite
#: and premier choice the plan code is also the rate control code; for
#: legacy term it is the first face-amount band.
PLAN_CODES: dict[str, str] = {
    # Participating whole life
    "MY": "54000", "FY": "54001", "MN": "54015", "FN": "54016",
    # Legacy term, first band
    "MN10": "42585", "MY10": "42586", "FN10": "42588", "FY10": "42589",
    "MN20": "47585", "MY20": "47586", "FN20": "47588", "FY20": "47589",
    "MN30": "47785", "MY30": "47786", "FN30": "47788", "FY30": "47789",
    # Select term
    "MN10_ST": "24585", "MY10_ST": "24586", "FN10_ST": "24588", "FY10_ST": "24589",
    "MN15_ST": "24685", "MY15_ST": "24686", "FN15_ST": "24688", "FY15_ST": "24689",
    "MN20_ST": "24785", "MY20_ST": "24786", "FN20_ST": "24788", "FY20_ST": "24789",
    "MN30_ST": "24885", "MY30_ST": "24886", "FN30_ST": "24888", "FY30_ST": "24889",
    # Worksite
    "MN20_WSP": "66251", "MY20_WSP": "66252", "FN20_WSP": "66253", "FY20_WSP": "66254",
    "MY_WSP": "66020", "FY_WSP": "66021", "MN_WSP": "66025", "FN_WSP": "66026",
    # Premier choice
    "MN_PC_L": "56100", "MY_PC_L": "56101", "FN_PC_L": "56102", "FY_PC_L": "56103",
    "MN_PC_G": "56104", "MY_PC_G": "56105", "FN_PC_G": "56106", "FY_PC_G": "56107",
}

#: Legacy term control codes for face amounts above the first band
LEGACY_TERM_UPPER_BAND: dict[str, str] = {
    "MN10": "42685", "MY10": "42686", "FN10": "42688", "FY10": "42689",
    "MN20": "47685", "MY20": "47686", "FN20": "47688", "FY20": "47689",
    "MN30": "47885", "MY30": "47886", "FN30": "47888", "FY30": "47889",
}


def resolve_plan_code(
    product_type: ProductType,
    gender: Gender,
    smoking_status: SmokingStatus,
) -> str:
    """
    Resolve the plan code used for illustration factors.

    Raises
    ------
    ConfigurationError
        If no plan code is mapped
    """
    key = control_code_key(product_type, gender, smoking_status)
    try:
        return PLAN_CODES[key]
    except KeyError:
        raise ConfigurationError(
            f"CRITICAL: No plan code mapped for control-code key '{key}'"
        ) from None


def legacy_term_upper_band_code(
    product_type: ProductType,
    gender: Gender,
    smoking_status: SmokingStatus,
) -> str:
    """Control code for a legacy term policy above the first face band."""
    key = control_code_key(product_type, gender, smoking_status)
    try:
        return LEGACY_TERM_UPPER_BAND[key]
    except KeyError:
        raise ConfigurationError(
            f"CRITICAL: No upper-band control code for key '{key}'"
        ) from None


def resolve_control_code(
    product_type: ProductType,
    gender: Gender,
    smoking_status: SmokingStatus,
    face_amount: float | None = None,
) -> str:
    """
    Resolve the base-policy rate control code.

    Parameters
    ----------
    product_type : ProductType
        Product being quoted
    gender : Gender
        MALE or FEMALE
    smoking_status : SmokingStatus
        Risk class
    face_amount : float, optional
        Face amount; selects the band for legacy term products

    Returns
    -------
    str
        Control code for the rate store

    Raises
    ------
    ConfigurationError
        If no mapping exists (unknown product, unkeyed gender, annuity)

    Examples
    --------
    >>> resolve_control_code(ProductType.PWL, Gender.MALE, SmokingStatus.NON_SMOKER)
    '54015'
    >>> resolve_control_code(ProductType.LT10, Gender.MALE, SmokingStatus.NON_SMOKER, 500_000)
    '42685'
    """
    if (
        product_type.is_legacy_term
        and face_amount is not None
        and face_amount > SETTINGS.premium.legacy_term_band_limit
    ):
        return legacy_term_upper_band_code(product_type, gender, smoking_status)
    return resolve_plan_code(product_type, gender, smoking_status)


# =============================================================================
# Rider Control Codes
# =============================================================================

DEPENDENT_CHILD_CODE = "dep_child"
GUARANTEED_INSURABILITY_CODE = "9000"

#: Rider kind -> control code template; ``{base}`` is the base control code
RIDER_CONTROL_CODES: dict[RiderKind, str] = {
    RiderKind.NONE: "{base}",
    RiderKind.WAIVER_OF_PREMIUM: "{base}_WP",
    RiderKind.ACCIDENTAL_DEATH_ADB: "{base}_ADB",
    RiderKind.ACCIDENTAL_DEATH_ADD: "{base}_ADD",
    RiderKind.DEPENDENT_CHILD: DEPENDENT_CHILD_CODE,
    RiderKind.GUARANTEED_INSURABILITY: GUARANTEED_INSURABILITY_CODE,
}

#: Control codes priced on their own rate rows regardless of product
STANDALONE_RIDER_CODES = frozenset({DEPENDENT_CHILD_CODE, GUARANTEED_INSURABILITY_CODE})


def rider_control_code(base_control_code: str, rider_kind: RiderKind) -> str:
    """
    Apply a rider kind to a base control code.

    Examples
    --------
    >>> rider_control_code("54015", RiderKind.WAIVER_OF_PREMIUM)
    '54015_WP'
    >>> rider_control_code("54015", RiderKind.GUARANTEED_INSURABILITY)
    '9000'
    """
    try:
        template = RIDER_CONTROL_CODES[rider_kind]
    except KeyError:
        raise ConfigurationError(
            f"CRITICAL: No control code for rider kind {rider_kind}"
        ) from None
    return template.format(base=base_control_code)


def resolve_policy_control_code(
    product_type: ProductType,
    gender: Gender,
    smoking_status: SmokingStatus,
    face_amount: float,
    rider_kind: RiderKind = RiderKind.NONE,
) -> str:
    """Resolve the control code for a policy component (base or rider)."""
    base = resolve_control_code(product_type, gender, smoking_status, face_amount)
    code = rider_control_code(base, rider_kind)
    logger.debug(
        f"Resolved {product_type.value}/{gender.value}/{smoking_status.value} "
        f"{rider_kind.value} -> {code}"
    )
    return code


# =============================================================================
# Illustration Plan Codes
# =============================================================================

#: Trailing digits of a base plan code -> PUA dividend plan suffix
PUA_DIVIDEND_SUFFIXES: dict[str, str] = {"00": "18", "01": "19"}

#: Replacement last digit by sex when no suffix rule matches
PUA_DIVIDEND_LAST_DIGITS: dict[Gender, str] = {Gender.MALE: "8", Gender.FEMALE: "9"}


def pua_dividend_plan_code(plan_code: str, gender: Gender) -> str:
    """
    Derive the PUA dividend plan code from a base plan code.

    Examples
    --------
    >>> pua_dividend_plan_code("54000", Gender.MALE)
    '54018'
    >>> pua_dividend_plan_code("54016", Gender.FEMALE)
    '54019'
    """
    suffix = PUA_DIVIDEND_SUFFIXES.get(plan_code[-2:])
    if suffix is not None:
        return plan_code[:-2] + suffix
    try:
        return plan_code[:-1] + PUA_DIVIDEND_LAST_DIGITS[gender]
    except KeyError:
        raise ConfigurationError(
            f"CRITICAL: No PUA dividend plan code for gender {gender.value}"
        ) from None
