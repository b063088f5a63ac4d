"""Quiz Prompt — fixed instruction template sent to the completion service."""

QUIZ_SYSTEM_PROMPT = (
    "You are an educational quiz generator. Always respond with valid JSON only."
)

QUIZ_GENERATION_PROMPT = """\
You are an educational quiz generator. Given the following study notes, \
create a quiz with exactly 5 multiple-choice questions.

Each question should:
1. Test understanding of key concepts from the notes
2. Have 4 answer choices
3. Have exactly one correct answer, given as its 0-based index in "answer"
4. Include a brief explanation of why the answer is correct

Respond in the following JSON format ONLY (no markdown, no extra text):
{
  "questions": [
    {
      "question": "The question text",
      "choices": ["Choice A", "Choice B", "Choice C", "Choice D"],
      "answer": 0,
      "explanation": "Brief explanation of the correct answer"
    }
  ]
}

Notes to create quiz from:
"""


def build_quiz_prompt(notes: str) -> str:
    return QUIZ_GENERATION_PROMPT + notes
