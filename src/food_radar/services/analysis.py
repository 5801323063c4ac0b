"""Food analysis through a multimodal chat-completion model."""

import asyncio
import base64
import contextlib
import io
import logging
import re
from collections.abc import Coroutine
from dataclasses import dataclass
from typing import Protocol

from PIL import Image, UnidentifiedImageError
from pydantic import ValidationError

from food_radar.domain.analysis import AnalysisResult, NutritionEstimate
from food_radar.domain.errors import (
    AnalysisCancelled,
    AnalysisError,
    EmptyResponseError,
    EncodingError,
    NoFoodDetected,
    SchemaError,
)

_logger = logging.getLogger(__name__)

NO_FOOD_SENTINEL = "No food detected"
NON_FOOD_SENTINELS = frozenset({NO_FOOD_SENTINEL, "Multiple food items"})

_CODE_FENCE = re.compile(r"```[ \t]*(?:json\b)?", re.IGNORECASE)

ANALYSIS_PROMPT = (
    "Analyze the food in this image. Return the name of the food as foodName. "
    "If there are multiple food items, sum their nutrition into a single "
    "estimate. Give calories, protein, carbs and fat as integers (grams for "
    "the macros). Give a healthScore from 1 to 10. List the main ingredients "
    "as a single comma-separated string in ingredients. "
    f'If there is no food in the image, return foodName "{NO_FOOD_SENTINEL}" '
    "with every number set to 0 and ingredients empty. "
    "Respond with only a JSON object with exactly these keys: foodName, "
    "calories, protein, carbs, fat, healthScore, ingredients."
)


class ChatCompletionClient(Protocol):
    """Interface for a single multimodal chat-completion request."""

    async def complete(
        self,
        *,
        model: str,
        prompt: str,
        image_data_url: str,
        max_tokens: int,
        timeout: float,
    ) -> str:
        """Return choices[0].message.content of the completion."""


@dataclass
class FoodAnalysisService:
    """Turns a captured image into a nutrition estimate or a classified failure."""

    client: ChatCompletionClient
    model: str
    max_tokens: int = 300
    timeout_seconds: float = 30.0
    jpeg_quality: int = 80

    async def analyze(
        self, image: "bytes | Image.Image", cancel: asyncio.Event | None = None
    ) -> AnalysisResult:
        """Run one analysis call; every AnalysisError becomes a failure result."""
        try:
            estimate = await self._analyze(image, cancel)
        except AnalysisError as exc:
            _logger.warning("Food analysis failed (%s): %s", exc.kind, exc)
            return AnalysisResult.failure(exc)
        return AnalysisResult.success(estimate)

    async def _analyze(
        self, image: "bytes | Image.Image", cancel: asyncio.Event | None
    ) -> NutritionEstimate:
        data_url = to_data_url(encode_jpeg(image, quality=self.jpeg_quality))
        request = self.client.complete(
            model=self.model,
            prompt=ANALYSIS_PROMPT,
            image_data_url=data_url,
            max_tokens=self.max_tokens,
            timeout=self.timeout_seconds,
        )
        if cancel is None:
            content = await request
        else:
            content = await _run_cancellable(request, cancel)
        return parse_estimate(content)


async def _run_cancellable(
    request: Coroutine[object, object, str], cancel: asyncio.Event
) -> str:
    if cancel.is_set():
        request.close()
        raise AnalysisCancelled("Analysis cancelled before it started")
    request_task = asyncio.ensure_future(request)
    cancel_task = asyncio.ensure_future(cancel.wait())
    try:
        await asyncio.wait(
            {request_task, cancel_task}, return_when=asyncio.FIRST_COMPLETED
        )
    except asyncio.CancelledError:
        request_task.cancel()
        raise
    finally:
        cancel_task.cancel()
    if not request_task.done():
        request_task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await request_task
        raise AnalysisCancelled("Analysis cancelled by caller")
    return request_task.result()


def parse_estimate(content: str) -> NutritionEstimate:
    """Parse message content, possibly fenced, into an estimate."""
    cleaned = strip_code_fences(content)
    if not cleaned:
        raise EmptyResponseError("Analysis response content is empty")
    try:
        estimate = NutritionEstimate.model_validate_json(cleaned)
    except ValidationError as exc:
        raise SchemaError(
            f"Content is not a nutrition estimate: {cleaned[:200]}"
        ) from exc
    if is_non_food_sentinel(estimate.foodName):
        raise NoFoodDetected(estimate.foodName)
    return estimate


def strip_code_fences(content: str) -> str:
    """Remove Markdown code-fence markers and surrounding whitespace."""
    return _CODE_FENCE.sub("", content).strip()


def is_non_food_sentinel(food_name: str) -> bool:
    normalized = food_name.strip().casefold()
    return any(normalized == sentinel.casefold() for sentinel in NON_FOOD_SENTINELS)


def encode_jpeg(image: "bytes | Image.Image", quality: int = 80) -> bytes:
    """Re-encode an image as JPEG at a fixed quality."""
    try:
        if isinstance(image, Image.Image):
            source = image
        else:
            source = Image.open(io.BytesIO(image))
        buffer = io.BytesIO()
        source.convert("RGB").save(buffer, format="JPEG", quality=quality)
    except (
        Image.DecompressionBombError,
        UnidentifiedImageError,
        OSError,
        ValueError,
        TypeError,
    ) as exc:
        raise EncodingError(f"Image could not be encoded as JPEG: {exc}") from exc
    return buffer.getvalue()


def to_data_url(jpeg_bytes: bytes) -> str:
    """Convert JPEG bytes to a base64 data URL for image input."""
    encoded = base64.b64encode(jpeg_bytes).decode("utf-8")
    return f"data:image/jpeg;base64,{encoded}"
