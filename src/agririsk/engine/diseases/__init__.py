"""
Disease risk model families, one module per crop
"""

from .base import DiseaseRiskModel, logistic
from .rice import (
    RICE_MODELS,
    BlastModel,
    BacterialLeafBlightModel,
    SheathBlightModel,
    BrownSpotModel
)
from .chilli import CHILLI_MODELS
from .blackgram import BLACKGRAM_MODELS
from .maize import MAIZE_MODELS

ALL_MODELS = RICE_MODELS + CHILLI_MODELS + BLACKGRAM_MODELS + MAIZE_MODELS

__all__ = [
    'DiseaseRiskModel',
    'logistic',
    'BlastModel',
    'BacterialLeafBlightModel',
    'SheathBlightModel',
    'BrownSpotModel',
    'RICE_MODELS',
    'CHILLI_MODELS',
    'BLACKGRAM_MODELS',
    'MAIZE_MODELS',
    'ALL_MODELS'
]
