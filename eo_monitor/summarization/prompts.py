"""
Prompt shared by every summarization backend.
"""

from typing import Dict, List

SYSTEM_PROMPT = "You are a helpful assistant that summarizes executive orders for a general audience."

USER_PROMPT_TEMPLATE = """Don't repeat the title or document number. Please provide a summary of this executive order \
in markdown format. Focus on the main purpose, key provisions, identify affected groups and potential \
impact on those groups. Keep the summary clear and accessible to a general audience. Use markdown headings, \
lists, and other formatting to make the summary easy to read. Include at least 5 Frequently Asked Questions \
with bolded text and bullet points but do not add Q and A to the questions. Answers should be bulleted \
on a new line, indented and italicized.

Executive Order text:
{text}"""


def build_user_prompt(text: str) -> str:
    return USER_PROMPT_TEMPLATE.format(text=text)


def build_messages(text: str) -> List[Dict[str, str]]:
    """Chat-style message list sent to the backends."""
    return [
        {"role": "system", "content": SYSTEM_PROMPT},
        {"role": "user", "content": build_user_prompt(text)},
    ]
