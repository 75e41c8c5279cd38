"""Prompt templates for interrupt classification and task duration estimates."""

from langchain_core.prompts import PromptTemplate

NO_TASK_PLACEHOLDER = "No specific task - general conversation"

CLASSIFICATION_TEMPLATE = PromptTemplate(
    template=(
        "<CurrentTask>\n"
        "{current_task}\n"
        "</CurrentTask>\n"
        "\n"
        "<NewMessage>\n"
        "{new_message}\n"
        "</NewMessage>\n"
        "\n"
        "Analyze the new message in context of the current task.\n"
        "\n"
        "Classify the user's intent into ONE of these categories:\n"
        '- "quick-question": Simple question that needs an immediate answer '
        "(what, when, where, how, why, is it, etc.)\n"
        '- "correction": User wants to change something about the current work '
        '("actually", "change that", "use X instead", etc.)\n'
        '- "alternative": User suggests a different approach but doesn\'t demand it '
        '("what if", "maybe", "consider", "how about")\n'
        '- "quick-task": Quick addition or side task ("also", "btw", "add X", "fix Y", "update Z")\n'
        '- "new-priority": User wants to stop current work and switch '
        '("stop", "forget that", "do this instead", "urgent", "prioritize")\n'
        '- "ambiguous": Intent is unclear or could be multiple things\n'
        "\n"
        "Respond in this exact format:\n"
        "Intent: <one of the above>\n"
        "Confidence: <high|medium|low>\n"
        "ShouldAsk: <true|false>\n"
        "Reasoning: <brief explanation>"
    ),
    input_variables=["current_task", "new_message"],
)

TIME_ESTIMATE_TEMPLATE = PromptTemplate(
    template=(
        "<TaskDescription>\n"
        "{task_description}\n"
        "</TaskDescription>\n"
        "\n"
        "Estimate how long this task will take to complete.\n"
        "\n"
        "Use ONE of these categories:\n"
        '- "quick": Under 2 minutes (simple lookups, short edits, single commands)\n'
        '- "medium": 2-30 minutes (multi-step work, moderate research, several files)\n'
        '- "long": Over 30 minutes (implementations, extensive research, major refactors)\n'
        "\n"
        "Respond in this exact format:\n"
        "Category: <quick|medium|long>\n"
        "Confidence: <high|medium|low>\n"
        'MinutesEstimate: <number or range like "5-10">\n'
        "Reasoning: <brief explanation>"
    ),
    input_variables=["task_description"],
)
