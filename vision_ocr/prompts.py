"""Extraction prompts and request assembly.

The system prompt is the same for every output format. Only the user
prompt names the requested format and the schema field to populate.
"""

from .models import OutputFormat

RESPONSE_FIELD = "response"

SYSTEM_PROMPT = """You are an OCR agent specializing in highly accurate optical character recognition.
Extract text from images with precision, keeping the result clear, consistent and in the format the user asks for.
Handle the following cases:

- **Hierarchical Text**: Keep the hierarchy of headers and subheaders in structured documents.
  - Markdown: use `#`, `##`, `###` for headings.
  - JSON: nest content under keys, e.g. `{ "header": "Title", "content": "Paragraph text here." }`
- **Tables**: Preserve rows and columns.
  - JSON: `{ "table": [[ "Header1", "Header2" ], [ "Data1", "Data2" ]] }`
  - Markdown:
    ```markdown
    | Header1 | Header2 |
    |---------|---------|
    | Data1   | Data2   |
    ```
- **Unextractable Content**: If nothing can be extracted, return a structured error such as
  `{ "error": "Content not extractable", "reason": "Low image quality" }` and make the failure explicit.
- **Numbers and Dates**: Keep separators (e.g. `1,234.56 USD`) and use consistent date formats (e.g. `YYYY-MM-DD`).
- **Accuracy**: Avoid typos and small inconsistencies, even for difficult input.
- **Visual Context**: Annotate text tied to visual elements such as captions or labels.
  - JSON: `{ "caption": "Label below chart", "text": "Data overview" }`
  - Markdown: `[caption: Label below chart]`
- **Emphasis**: Give priority to bold or highlighted text such as headings or key points, and annotate it if needed.
- **Embedded Text**: Capture text inside diagrams or icons. Use `[text partially obscured]` where visuals hide text.
- **Handwriting**: Transcribe handwritten text. Use `[unclear]` for illegible sections.
- **Rotated or Skewed Text**: Correct orientation where possible. Use `[rotated text illegible]` otherwise.
- **Complex Layouts**: Handle multi-column pages, nested tables and overlapping content.
  In JSON, separate columns with keys like `"column1": [...]`, `"column2": [...]`.
- **Confidence**: Include confidence scores for uncertain text when possible,
  e.g. `{ "text": "Extracted content", "confidence": 0.85 }`.
- **Decorative Fonts**: Use `[decorative font text]` when non-standard fonts cannot be read.
- **Noise**: Ignore faint watermarks, stray marks and scan artifacts unless asked otherwise.
- **Mixed Content**: Tables stay tabular, bullet points and paragraphs keep their structure.
- **Multilingual Text**: Keep the original script and tag mixed-language content with language codes,
  e.g. `[en] This is English. [es] Esto es Español.`

Make sure every output is valid for the schema: JSON must be structurally correct and Markdown syntactically sound.
Always store the result in the 'response' field."""

_FORMAT_DIRECTIVES = """- **JSON**: Respond with a JSON object encapsulating the extracted content.
- **Markdown**: Respond with a well-formatted markdown string.
- **Text**: Respond with a plain text string."""


def user_prompt(fmt: OutputFormat) -> str:
    """Return the user instruction naming the target format and the response field."""
    return (
        "Extract all text from this image accurately. "
        f"RESPOND IN THE '{fmt.value}' FORMAT AND STORE THE RESULT IN THE "
        f"'{RESPONSE_FIELD}' FIELD OF THE SCHEMA. USE THE FOLLOWING FORMATS AS DIRECTED:\n\n"
        f"{_FORMAT_DIRECTIVES}\n\n"
        "Preserve the structure and layout of the original content when using JSON or markdown: "
        "tables stay tabular, bullet points are kept and paragraphs stay coherent. "
        "Annotate multilingual text where appropriate."
    )


def build_messages(image_b64: str, fmt: OutputFormat, media_type: str = "image/png") -> list[dict]:
    """Assemble the two-part request: system instruction, then user text and image."""
    return [
        {"role": "system", "content": SYSTEM_PROMPT},
        {
            "role": "user",
            "content": [
                {"type": "text", "text": user_prompt(fmt)},
                {
                    "type": "image",
                    "source": {
                        "type": "base64",
                        "media_type": media_type,
                        "data": image_b64,
                    },
                },
            ],
        },
    ]
