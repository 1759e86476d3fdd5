"""Run a handful of images through the pipeline and save the markdown output.

Usage: python examples/ocr_basic.py  (needs ANTHROPIC_API_KEY)
"""

import asyncio
import logging
from pathlib import Path

from vision_ocr import AnthropicClient, OutputFormat, SourceUnavailable, extract_from_image

logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
logger = logging.getLogger(__name__)

IMAGES = [
    "https://encrypted-tbn0.gstatic.com/images?q=tbn:ANd9GcSEn4BsqOK3uI8zFlqQ616FvpMz5HtQ3XBo5Q&s",
    "https://www.editpad.org/images/blog/2022/04/1649416387note-(1).png",
    "test_data/test_2.png",
    "test_data/test_3.png",
]

OUTPUT_PATH = Path("output/ocr-basic-output.md")


async def run() -> None:
    sections: list[str] = []
    async with AnthropicClient() as client:
        for source in IMAGES:
            logger.info("Processing %s", source)
            try:
                result = await extract_from_image(source, OutputFormat.MARKDOWN, client)
            except SourceUnavailable as e:
                logger.error("Skipping %s: %s", source, e)
                continue
            sections.append(f"Source: {source}\n\n{result}\n\n")
            logger.info("Processed %s", source)

    OUTPUT_PATH.parent.mkdir(parents=True, exist_ok=True)
    OUTPUT_PATH.write_text("".join(sections), encoding="utf-8")
    logger.info("Wrote %s", OUTPUT_PATH)


if __name__ == "__main__":
    asyncio.run(run())
