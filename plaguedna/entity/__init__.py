"""Entity model for plaguedna."""

from .dna import DNA, encode_capabilities
from .pathogen import Pathogen, default_random_mutation

__all__ = [
    'DNA',
    'encode_capabilities',
    'Pathogen',
    'default_random_mutation',
]
