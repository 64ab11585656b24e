import asyncio
import base64
import os
from typing import Any

import httpx

from statement_parser.errors import OCRError
from statement_parser.logger import get_logger

logger = get_logger(__name__)

VISION_URL = "https://vision.api.cloud.yandex.net/vision/v1/batchAnalyze"
DEFAULT_OCR_TIMEOUT_SECONDS = 60.0
LANGUAGE_CODES = ["ru", "en"]


def _lines_from_pages(pages: list[dict[str, Any]]) -> list[str]:
    lines: list[str] = []
    for page in pages:
        for block in page.get("blocks") or []:
            for line in block.get("lines") or []:
                words = [w.get("text", "") for w in line.get("words") or []]
                text = " ".join(word for word in words if word).strip()
                if not text:
                    text = str(line.get("text") or "").strip()
                if text:
                    lines.append(text)
    return lines


def extract_text(payload: dict[str, Any]) -> str:
    """Join recognised lines in reading order, one per output line."""
    lines: list[str] = []
    for result in payload.get("results") or []:
        for inner in result.get("results") or []:
            detection = inner.get("textDetection") or {}
            lines.extend(_lines_from_pages(detection.get("pages") or []))
    if not lines and isinstance(payload.get("textAnnotation"), dict):
        lines.extend(_lines_from_pages(payload["textAnnotation"].get("pages") or []))
    return "\n".join(lines)


class YandexVisionClient:
    def __init__(
        self,
        api_key: str | None = None,
        folder_id: str | None = None,
        client: httpx.AsyncClient | None = None,
        timeout: float = DEFAULT_OCR_TIMEOUT_SECONDS,
    ):
        self.api_key = api_key or os.getenv("YANDEX_VISION_API_KEY")
        self.folder_id = folder_id or os.getenv("YANDEX_FOLDER_ID")
        self.timeout = timeout
        self._client = client
        self._client_lock = asyncio.Lock()

    @property
    def configured(self) -> bool:
        return bool(self.api_key)

    @property
    def headers(self) -> dict[str, str]:
        return {
            "Authorization": f"Api-Key {self.api_key}",
            "Content-Type": "application/json",
        }

    async def aclose(self) -> None:
        if self._client and not self._client.is_closed:
            await self._client.aclose()

    async def _get_client(self) -> httpx.AsyncClient:
        client = self._client
        if client is not None and not client.is_closed:
            return client

        async with self._client_lock:
            client = self._client
            if client is None or client.is_closed:
                client = httpx.AsyncClient(timeout=self.timeout)
                self._client = client
            return client

    def _build_request(self, image: bytes, mime_type: str) -> dict[str, Any]:
        body: dict[str, Any] = {
            "analyze_specs": [
                {
                    "content": base64.b64encode(image).decode("ascii"),
                    "features": [
                        {
                            "type": "TEXT_DETECTION",
                            "text_detection_config": {"language_codes": LANGUAGE_CODES},
                        }
                    ],
                    "mime_type": mime_type,
                }
            ],
        }
        if self.folder_id:
            body["folderId"] = self.folder_id
        return body

    async def recognize(self, image: bytes, mime_type: str = "image/jpeg") -> str:
        """Run text detection on one image.

        Raises:
            OCRError: when the backend is not configured, fails, or finds no text.
        """
        if not self.configured:
            raise OCRError("YANDEX_VISION_API_KEY is not set")

        client = await self._get_client()
        try:
            response = await client.post(
                VISION_URL,
                headers=self.headers,
                json=self._build_request(image, mime_type),
                timeout=self.timeout,
            )
            response.raise_for_status()
            payload = response.json()
        except httpx.HTTPStatusError as exc:
            logger.error(
                "[OCR] Yandex Vision returned %s: %s",
                exc.response.status_code,
                exc.response.text[:200],
            )
            raise OCRError(f"Yandex Vision API error: {exc.response.status_code}") from exc
        except (httpx.HTTPError, ValueError) as exc:
            logger.error("[OCR] Yandex Vision request failed: %s", exc)
            raise OCRError(f"Yandex Vision request failed: {exc}") from exc

        text = extract_text(payload)
        if not text.strip():
            raise OCRError("No text recognised in image")
        logger.info("[OCR] Recognised %d lines.", text.count("\n") + 1)
        return text
