SYSTEM_PROMPT = (
    "You are a data extraction specialist. You convert noisy text extracted from scanned "
    "statistical tables into structured JSON. Return only JSON."
)

TABLE_EXTRACTION_PROMPT = """Extract the following raw text into structured data.
Rules:

Identify the correct table headers, even if repeated or noisy.

Parse numbers as numeric values (not strings).

If a value is missing (e.g. "." or "-"), return 0.

For tables with sub-categories (Individual, Establishment, Agriculture Holding), nest them in JSON.

Return a single JSON array with one object per table row.

Expected JSON structure for single-category tables:

[
  {
    "State": "Malaysia",
    "Number of Agriculture Holding": 8263,
    "Sales Value (RM '000)": 13310105.96
  }
]

Expected JSON structure for multi-category tables:

[
  {
    "State": "Malaysia",
    "Individual": {"Number": 7143, "Sales Value (RM '000)": 273267.38},
    "Establishment": {"Number": 1120, "Sales Value (RM '000)": 13036838.58}
  }
]

Raw text:

{raw_text}
"""

SHORTER_RESPONSE_SUFFIX = (
    "\n\nYour previous output was cut off or was not valid JSON. "
    "Return ONLY one valid JSON array of row objects. "
    "No prose, no markdown fences. Keep every row complete and stop before the output limit."
)


def build_prompt(page_texts: list[str], *, retry: bool = False) -> str:
    raw_text = "\n\n".join(text.strip() for text in page_texts if text and text.strip())
    prompt = TABLE_EXTRACTION_PROMPT.replace("{raw_text}", raw_text)
    if retry:
        prompt = f"{prompt}{SHORTER_RESPONSE_SUFFIX}"
    return prompt
