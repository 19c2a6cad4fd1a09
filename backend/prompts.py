import json

# Prompt for turning free text into a single task record.
# Filled with the user's text, a JSON snapshot of existing tasks and today's date.
EXTRACTION_PROMPT = """Given the user input: "{text}"
And the existing tasks in the database: {context}

Analyze the current situation and prioritize the task assignment based on the following factors:
- Priority: If the task is marked as high priority, it should be scheduled as soon as possible.
- Availability: Consider the availability of time slots based on the due dates and durations of existing tasks.
- Context: Ensure the task does not overlap with existing tasks and fits logically into the schedule.
- Duration: Estimate the duration of the task in minutes based on its complexity. If not specified, default to 60 minutes, but adjust based on the task's nature and priority.
- Due Date: If the user specifies a relative date like "tomorrow" or "next week", calculate the exact date based on today's date ({today}). If no date is specified, suggest the nearest available date based on the existing tasks or default to tomorrow.
- Location: If the task requires a specific location or resource, mention it in the description.

Extract the following task attributes:
- title: A short title for the task.
- description: A detailed description of the task (default to "No description provided" if not specified).
- dueDate: The due date in ISO 8601 format, or null. If no date is specified, infer the most logical date based on priority and availability.
- duration: The estimated duration of the task in minutes, or null.
- status: One of "pending", "in_progress" or "completed" (default to "pending" if not specified).

Respond with this exact JSON format:
{{
    "title": "string",
    "description": "string or null",
    "dueDate": "string (ISO 8601) or null",
    "duration": "number or null",
    "status": "pending | in_progress | completed"
}}

Only respond with valid JSON, no other text.
"""


def build_extraction_prompt(text: str, context: list[dict], today: str) -> str:
    return EXTRACTION_PROMPT.format(
        text=text,
        context=json.dumps(context, indent=2),
        today=today,
    )
