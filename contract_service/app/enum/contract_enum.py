from enum import Enum


class ContractStatus(str, Enum):

    active = "active"
    expired = "expired"
    near_expiry = "near-expiry"


class ContractType(str, Enum):

    quote = "quote"
    signed = "signed"


class NotificationType(str, Enum):

    contract_full = "contract_full"


# carry-over interventions written by renewals
CARRY_OVER_TECHNICIAN = "Système"
CARRY_OVER_SUFFIX = "(reporté)"
DEFAULT_CARRY_OVER_DESCRIPTION = "Heures supplémentaires"
