"""
Analysis Pipeline

State machine that sequences decode → quality gate → enhance → color →
detection → scoring, with a time budget on each slow stage.

Flow:
    IDLE → VALIDATING → ENHANCING → COLOR_ANALYZING → DETECTING_CONDITIONS → SCORING → DONE
    with absorbing REJECTED (bad input) and FAILED (timeout / internal error).

The orchestrator keeps no per-call state on the instance; concurrent calls
are independent.
"""
from concurrent.futures import Future, TimeoutError as FuturesTimeoutError
from dataclasses import dataclass, field
from enum import Enum
import threading
import time
from typing import Any, Callable, Dict, List, Optional

import numpy as np

from dental_ai.config import PipelineConfig
from dental_ai.core.detection import ConditionDetector
from dental_ai.core.extraction import ImageSignalExtractor, NumpySignalExtractor
from dental_ai.core.models import (
    AnalysisResult,
    ColorAnalysis,
    DetectionSignals,
    ImageQuality,
    ImageSignals,
    UserContext,
)
from dental_ai.core.recommendations import RecommendationEngine
from dental_ai.core.scoring import ConfidenceScorer, SeverityAssessor
from dental_ai.core.validation import QualityGate, QualityThresholds
from dental_ai.utils import (
    get_logger,
    DentalAnalysisError,
    InvalidImageError,
    LowQualityImageError,
    MLFailureError,
    ProcessingTimeoutError,
)

logger = get_logger(__name__)


class PipelineState(str, Enum):
    IDLE = "idle"
    VALIDATING = "validating"
    ENHANCING = "enhancing"
    COLOR_ANALYZING = "color_analyzing"
    DETECTING_CONDITIONS = "detecting_conditions"
    SCORING = "scoring"
    DONE = "done"
    REJECTED = "rejected"
    FAILED = "failed"


@dataclass
class AnalysisOutcome:
    """Terminal state of one pipeline run: a result or an error, never both."""
    state: PipelineState
    result: Optional[AnalysisResult] = None
    error: Optional[DentalAnalysisError] = None
    trail: List[PipelineState] = field(default_factory=list)
    stage_timings_ms: Dict[str, float] = field(default_factory=dict)
    quality: Optional[ImageQuality] = None

    @property
    def ok(self) -> bool:
        return self.state == PipelineState.DONE

    def unwrap(self) -> AnalysisResult:
        """Return the result or raise the error."""
        if self.result is not None:
            return self.result
        raise self.error

    def to_dict(self) -> Dict[str, Any]:
        return {
            "state": self.state.value,
            "result": self.result.to_dict() if self.result else None,
            "error": self.error.to_dict() if self.error else None,
            "trail": [s.value for s in self.trail],
            "stage_timings_ms": {k: round(v, 2) for k, v in self.stage_timings_ms.items()},
        }


class _Run:
    """Mutable bookkeeping for a single analyze() call."""

    def __init__(self):
        self.trail: List[PipelineState] = [PipelineState.IDLE]
        self.timings: Dict[str, float] = {}
        self.quality: Optional[ImageQuality] = None
        self._started = time.perf_counter()

    def enter(self, state: PipelineState):
        self._close_stage()
        self.trail.append(state)

    def _close_stage(self):
        now = time.perf_counter()
        current = self.trail[-1]
        if current != PipelineState.IDLE:
            self.timings[current.value] = (now - self._started) * 1000
        self._started = now

    def finish(self, state: PipelineState, **kwargs) -> AnalysisOutcome:
        self.enter(state)
        return AnalysisOutcome(
            state=state,
            trail=list(self.trail),
            stage_timings_ms=dict(self.timings),
            quality=self.quality,
            **kwargs,
        )


class AnalysisOrchestrator:
    """
    Runs the full analysis for one image per call.

    Args:
        extractor: Pixel-level collaborator (defaults to NumpySignalExtractor)
        detector: Condition detector, optionally wrapping an ML detector
        quality_gate: Gate used before any detection work
        engine: Recommendation engine
        config: Stage budgets
    """

    def __init__(
        self,
        extractor: Optional[ImageSignalExtractor] = None,
        detector: Optional[ConditionDetector] = None,
        quality_gate: Optional[QualityGate] = None,
        engine: Optional[RecommendationEngine] = None,
        config: Optional[PipelineConfig] = None,
    ):
        self.extractor = extractor or NumpySignalExtractor()
        self.detector = detector or ConditionDetector()
        self.quality_gate = quality_gate or QualityGate()
        self.engine = engine or RecommendationEngine()
        self.config = config or PipelineConfig()

        logger.info(
            f"AnalysisOrchestrator initialized (timeouts: enhance={self.config.enhance_timeout_s}s, "
            f"color={self.config.color_timeout_s}s, detection={self.config.detection_timeout_s}s)"
        )

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def analyze(
        self,
        image: Any,
        quality_thresholds: Optional[QualityThresholds] = None,
        context: Optional[UserContext] = None,
    ) -> AnalysisOutcome:
        """
        Run the pipeline once. Never raises; inspect the outcome or call
        ``unwrap()``.
        """
        run = _Run()
        logger.info("Analysis started")

        try:
            result = self._execute(run, image, quality_thresholds, context)
        except (InvalidImageError, LowQualityImageError) as e:
            logger.warning(f"Analysis rejected: {e.message}")
            return run.finish(PipelineState.REJECTED, error=e)
        except DentalAnalysisError as e:
            logger.error(f"Analysis failed in {run.trail[-1].value}: {e.message}")
            return run.finish(PipelineState.FAILED, error=e)
        except Exception as e:
            logger.error(f"Unexpected error in {run.trail[-1].value}: {e}", exc_info=True)
            return run.finish(PipelineState.FAILED, error=MLFailureError(f"Unexpected error: {e}"))

        outcome = run.finish(PipelineState.DONE, result=result)
        logger.info(
            f"Analysis done: conditions={sorted(c.value for c in result.conditions)}, "
            f"score={result.overall_health_score}, confidence={result.confidence:.2f}"
        )
        logger.debug(f"Stage timings (ms): {outcome.stage_timings_ms}")
        return outcome

    def assess_realtime(self, image: Any) -> ImageQuality:
        """Cheap preview check with loose thresholds; no detection work."""
        decoded = self._decode(image)
        width, height = self.extractor.dimensions(decoded)
        signals = ImageSignals(
            width=width,
            height=height,
            brightness=self.extractor.brightness(decoded),
            contrast=self.extractor.contrast(decoded),
            blur=0.0,  # not consulted by the realtime gate
        )
        return self.quality_gate.assess_realtime(signals)

    # ------------------------------------------------------------------
    # Stages
    # ------------------------------------------------------------------

    def _execute(
        self,
        run: _Run,
        image: Any,
        thresholds: Optional[QualityThresholds],
        context: Optional[UserContext],
    ) -> AnalysisResult:
        run.enter(PipelineState.VALIDATING)
        decoded = self._decode(image)
        quality = self.quality_gate.assess(self._quality_signals(decoded), thresholds)
        run.quality = quality
        if quality.poor:
            raise LowQualityImageError(list(quality.issues))

        run.enter(PipelineState.ENHANCING)
        enhanced = self._run_with_timeout(
            PipelineState.ENHANCING, self.config.enhance_timeout_s,
            self.extractor.enhance, decoded,
        )

        run.enter(PipelineState.COLOR_ANALYZING)
        color: ColorAnalysis = self._run_with_timeout(
            PipelineState.COLOR_ANALYZING, self.config.color_timeout_s,
            self.extractor.dominant_color, enhanced,
        )

        run.enter(PipelineState.DETECTING_CONDITIONS)
        conditions = self._run_with_timeout(
            PipelineState.DETECTING_CONDITIONS, self.config.detection_timeout_s,
            self._detect_conditions, enhanced, color,
        )

        run.enter(PipelineState.SCORING)
        severity = SeverityAssessor.assess(conditions)
        confidence = ConfidenceScorer.score(conditions, quality)
        recommendations = self.engine.generate(conditions, severity, color, context)

        return AnalysisResult(
            conditions=conditions,
            confidence=confidence,
            recommendations=tuple(recommendations),
        )

    def _decode(self, image: Any) -> np.ndarray:
        try:
            decoded = self.extractor.decode(image)
        except Exception as e:
            logger.warning(f"Image decode raised: {e}")
            raise InvalidImageError(details={"reason": str(e)})
        if decoded is None:
            raise InvalidImageError()
        return decoded

    def _quality_signals(self, image: np.ndarray) -> ImageSignals:
        width, height = self.extractor.dimensions(image)
        return ImageSignals(
            width=width,
            height=height,
            brightness=self.extractor.brightness(image),
            contrast=self.extractor.contrast(image),
            blur=self.extractor.blur(image),
        )

    def _detect_conditions(self, enhanced: np.ndarray, color: ColorAnalysis):
        edge_brightness = edge_contrast = None
        try:
            edge_image = self.extractor.edges(enhanced)
        except Exception as e:
            logger.debug(f"Edge extraction failed, skipping edge heuristics: {e}")
            edge_image = None

        if edge_image is not None:
            edge_brightness = self.extractor.brightness(edge_image)
            edge_contrast = self.extractor.contrast(edge_image)

        signals = DetectionSignals(
            contrast=self.extractor.contrast(enhanced),
            blur=self.extractor.blur(enhanced),
            edge_brightness=edge_brightness,
            edge_contrast=edge_contrast,
        )
        return self.detector.detect(signals, color, enhanced)

    @staticmethod
    def _run_with_timeout(stage: PipelineState, timeout_s: float, fn: Callable, *args):
        """
        Race ``fn`` against a timer on a private daemon thread.

        On timeout the thread is abandoned (Python threads cannot be killed)
        and its eventual result is discarded. Being a daemon, it never holds
        up interpreter shutdown.
        """
        future: Future = Future()

        def _work():
            future.set_running_or_notify_cancel()
            try:
                value = fn(*args)
            except Exception as e:
                future.set_exception(e)
            else:
                future.set_result(value)

        worker = threading.Thread(target=_work, name=f"dental-{stage.value}", daemon=True)
        worker.start()
        try:
            return future.result(timeout=timeout_s)
        except FuturesTimeoutError:
            if future.done():
                # fn itself raised a TimeoutError
                raise
            logger.warning(f"Stage {stage.value} exceeded {timeout_s}s budget")
            raise ProcessingTimeoutError(stage=stage.value, seconds=timeout_s)
