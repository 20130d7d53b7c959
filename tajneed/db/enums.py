"""Enum definitions for directory constants."""

from enum import Enum


class OrganizationLevel(str, Enum):
    """Coarsest hierarchy tier reachable from a member or account."""

    ZONE = "zone"
    DILA = "dila"
    MUQAM = "muqam"


class BloodGroup(str, Enum):
    """Blood groups as reported by the external member feed."""

    A_POSITIVE = "A+"
    A_NEGATIVE = "A-"
    B_POSITIVE = "B+"
    B_NEGATIVE = "B-"
    AB_POSITIVE = "AB+"
    AB_NEGATIVE = "AB-"
    O_POSITIVE = "O+"
    O_NEGATIVE = "O-"


class Genotype(str, Enum):
    """Haemoglobin genotypes as reported by the external member feed."""

    AA = "AA"
    AS = "AS"
    AC = "AC"
    SS = "SS"
    SC = "SC"


class JobType(str, Enum):
    """Types of background jobs."""

    JAMAAT_SYNC = "jamaat_sync"  # Reconcile jamaats against Tajneed
    MEMBER_SYNC = "member_sync"  # Reconcile members against Tajneed
