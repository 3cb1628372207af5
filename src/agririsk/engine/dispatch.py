"""
Crop / disease dispatch

Maps a plot's crop to its disease set and routes each disease to its
scoring model. The disease -> model table is built once and checked
against the full Disease enum, so an unmapped disease fails at start-up
rather than scoring zero at run time.
"""

from typing import Any, Dict, Iterable, List, Optional, Type, Union

from loguru import logger

from .aggregator import aggregate_weather
from .diseases import ALL_MODELS, DiseaseRiskModel
from ..exceptions import UnmappedDiseaseError
from ..models.risk import CropType, Disease, DiseaseRiskResult
from ..models.weather import WeatherWindow


class CropDiseaseDispatch:
    """
    Registry of disease scoring models
    """

    def __init__(
        self,
        model_classes: Iterable[Type[DiseaseRiskModel]] = ALL_MODELS,
        overrides: Optional[Dict[str, Dict[str, Any]]] = None
    ):
        """
        Build and validate the disease -> model table

        Args:
            model_classes: DiseaseRiskModel subclasses to register
            overrides: Per-disease {"bias": float, "weights": {...}} overrides

        Raises:
            UnmappedDiseaseError: If a Disease has no model or two models claim one
            ValueError: If overrides name an unknown disease or signal
        """
        overrides = dict(overrides or {})
        unknown = set(overrides) - {d.value for d in Disease}
        if unknown:
            raise ValueError(f"Overrides for unknown diseases: {', '.join(sorted(unknown))}")

        self._models: Dict[Disease, DiseaseRiskModel] = {}
        for model_class in model_classes:
            disease = model_class.disease
            if disease in self._models:
                raise UnmappedDiseaseError(f"Duplicate model registered for {disease.value}")
            params = overrides.get(disease.value, {})
            self._models[disease] = model_class(
                weights=params.get("weights"),
                bias=params.get("bias"),
            )

        missing = [d.value for d in Disease if d not in self._models]
        if missing:
            raise UnmappedDiseaseError(f"No risk model registered for: {', '.join(missing)}")

        self._crop_diseases: Dict[CropType, List[Disease]] = {crop: [] for crop in CropType}
        for disease in Disease:
            self._crop_diseases[disease.crop].append(disease)

        logger.debug(f"Registered {len(self._models)} disease models")

    def diseases_for_crop(self, crop: Union[str, CropType, None]) -> List[Disease]:
        """
        Diseases scored for a crop, in fixed enum order

        Unsupported crops yield an empty list.
        """
        crop_type = crop if isinstance(crop, CropType) else CropType.parse(crop)
        if crop_type is None:
            return []
        return list(self._crop_diseases[crop_type])

    def is_supported(self, crop: Union[str, CropType, None]) -> bool:
        return bool(self.diseases_for_crop(crop))

    def model_for(self, disease: Union[str, Disease]) -> DiseaseRiskModel:
        return self._models[Disease(disease)]

    def evaluate(self, disease: Union[str, Disease], window: Optional[WeatherWindow]) -> DiseaseRiskResult:
        """
        Score one disease over a weather window

        Args:
            disease: Disease to score
            window: Weather window; empty or missing windows score zero

        Returns:
            DiseaseRiskResult with modifiers applied
        """
        disease = Disease(disease)
        if window is None or window.is_empty:
            return DiseaseRiskResult(
                disease=disease,
                risk01=0.0,
                explanation=["No recent weather data"],
            )

        model = self._models[disease]
        agg = aggregate_weather(window)
        return model.evaluate(
            agg,
            management=window.management,
            stage=window.crop_stage,
            anchor_date=window.anchor_date,
        )
