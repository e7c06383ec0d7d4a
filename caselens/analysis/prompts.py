"""Prompts for chunk analysis, final summary, next steps and follow-up answers."""
from __future__ import annotations

import json

SYSTEM_MESSAGE = (
    "You are a precise case analysis assistant. Only make statements backed by the text. "
    "Maintain high accuracy over completeness."
)

JSON_RULES = "Output only the JSON object that conforms to the schema, no markdown or explanation."

CHUNK_USER_TEMPLATE = """Analyze this portion of a client case (part {part} of {total}). Provide:
1. summary: a brief factual summary
2. keyPoints: the key points, one per item
3. references: important lines, with lineNumber counted from 1 at the first line after the "---" separator
4. nextSteps: potential next steps based on this information
5. confidence: a score from 0 to 1 about the completeness of your analysis

Remember:
- Only include factual information present in the text
- Mark any uncertain conclusions clearly
- Include line references for key points

Text to analyze:
---
{chunk_text}"""

FINAL_SUMMARY_SYSTEM = "Create a brief, factual summary based on the provided partial summaries and key points."

FINAL_SUMMARY_USER_TEMPLATE = """Combine these partial summaries of one case into a single concise summary.
Merge duplicates and keep events in chronological order.

Partial summaries:
{summaries}

Key points:
{key_points}"""

NEXT_STEPS_USER_TEMPLATE = """Based on this history of interactions on a client's account, propose the next steps.
Return nextSteps as an ordered list of concrete actions, a short rationale, and a confidence from 0 to 1.

Case summary:
{summaries}

Candidate next steps from earlier analysis:
{candidates}"""

ANSWER_USER_TEMPLATE = """Using only the case context below, answer the question.
If the context does not contain the answer, say so. Suggest follow-up questions that would close the gaps.
Return answer, followUpQuestions and a confidence from 0 to 1.

Context:
{context}

Question: {question}"""

DEFAULT_QUESTION = "What is the current state of this case and what remains open?"


def _bullets(items: list[str]) -> str:
    return "\n".join(f"- {item}" for item in items) or "- (none)"


def build_chunk_messages(chunk_text: str, part: int, total: int) -> list[dict[str, str]]:
    """Build [system, user] messages for one chunk."""
    return [
        {"role": "system", "content": f"{SYSTEM_MESSAGE}\n{JSON_RULES}"},
        {
            "role": "user",
            "content": CHUNK_USER_TEMPLATE.format(part=part, total=total, chunk_text=chunk_text),
        },
    ]


def build_final_summary_messages(summaries: list[str], key_points: list[str]) -> list[dict[str, str]]:
    return [
        {"role": "system", "content": FINAL_SUMMARY_SYSTEM},
        {
            "role": "user",
            "content": FINAL_SUMMARY_USER_TEMPLATE.format(
                summaries="\n\n".join(summaries),
                key_points=_bullets(key_points),
            ),
        },
    ]


def build_next_steps_messages(summaries: list[str], candidates: list[str]) -> list[dict[str, str]]:
    return [
        {"role": "system", "content": f"{SYSTEM_MESSAGE}\n{JSON_RULES}"},
        {
            "role": "user",
            "content": NEXT_STEPS_USER_TEMPLATE.format(
                summaries="\n\n".join(summaries),
                candidates=_bullets(candidates),
            ),
        },
    ]


def build_answer_messages(summary: str, next_steps: list[str], question: str | None) -> list[dict[str, str]]:
    context = json.dumps({"summary": summary, "nextSteps": next_steps}, ensure_ascii=False, indent=2)
    return [
        {"role": "system", "content": f"{SYSTEM_MESSAGE}\n{JSON_RULES}"},
        {
            "role": "user",
            "content": ANSWER_USER_TEMPLATE.format(context=context, question=question or DEFAULT_QUESTION),
        },
    ]
