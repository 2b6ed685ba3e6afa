"""LLM prompts for prompt generation, improvement and classification.

Generation and improvement ask the model for the prompt text only, so the
reply can be stored and categorized without post-processing. The classifier
prompt pins the reply to the literal "<category>,<confidence>" format parsed
by ``promptpilot.prompts.categorizer.parse_classification``.
"""

GENERATE_PROMPT_SYSTEM = (
    "You are an expert prompt engineer. Your task is to create an effective prompt "
    "based on the user's goal. Your response should ONLY include the prompt text, "
    "with no additional explanations or commentary."
)

GENERATE_PROMPT = """I need help crafting an effective AI prompt for the following goal:

Goal: {goal}
{context_section}
Consider the following when crafting the prompt:
1. Be specific and clear about what you want the AI to do
2. Provide necessary context and constraints
3. Structure the prompt logically
4. Use appropriate tone and style for the intended purpose
5. Include any relevant examples if needed

Please create a well-crafted prompt that will achieve this goal effectively."""

IMPROVE_PROMPT_SYSTEM = (
    "You are an expert prompt engineer. Your task is to improve prompts to make them "
    "more effective. Your response should ONLY include the improved prompt text, "
    "with no additional explanations or commentary."
)

IMPROVE_PROMPT = """I need help improving the following prompt to make it more effective:

Original prompt:
"{prompt}"

{feedback_section}Please analyze the prompt and improve it by:
1. Making it more specific and clear
2. Adding necessary context or constraints
3. Improving the structure and flow
4. Adjusting the tone and style for the intended purpose
5. Adding examples or clarifications if needed

Provide only the improved prompt without explanations or commentary."""

CLASSIFY_PROMPT_SYSTEM = (
    "You are an AI model classifier. Your task is to analyze prompts and classify them "
    "into categories. Respond with ONLY the category name and a confidence score between "
    '0 and 1, separated by a comma. Example: "code,0.85"'
)

CLASSIFY_PROMPT = """Analyze the following prompt and classify it into one of these categories:
- chat: General conversation, Q&A, or simple interactions
- code: Programming, code generation, debugging, or technical explanations
- reasoning: Complex problem-solving, logical analysis, or deep reasoning
- writing: Content creation, creative writing, or document drafting
- multimodal: Tasks involving images, audio, or other non-text media

Prompt to classify:
"{prompt}"

Respond with ONLY the category name and a confidence score between 0 and 1, separated by a comma.
Example: "code,0.85\""""


def build_generate_messages(goal: str, context: str | None = None) -> list[dict]:
    context_section = f"\nAdditional context: {context}\n" if context else ""
    return [
        {"role": "system", "content": GENERATE_PROMPT_SYSTEM},
        {
            "role": "user",
            "content": GENERATE_PROMPT.format(goal=goal, context_section=context_section),
        },
    ]


def build_improve_messages(prompt: str, feedback: str | None = None) -> list[dict]:
    feedback_section = f"User feedback on what to improve: {feedback}\n\n" if feedback else ""
    return [
        {"role": "system", "content": IMPROVE_PROMPT_SYSTEM},
        {
            "role": "user",
            "content": IMPROVE_PROMPT.format(prompt=prompt, feedback_section=feedback_section),
        },
    ]


def build_classify_messages(prompt: str) -> list[dict]:
    return [
        {"role": "system", "content": CLASSIFY_PROMPT_SYSTEM},
        {"role": "user", "content": CLASSIFY_PROMPT.format(prompt=prompt)},
    ]
