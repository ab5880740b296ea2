"""
Prompts pour le LLM.
"""

PROMPTS = {
    "classify_lines": """<|User|> Below is text extracted from a PDF.
Please identify the academic course name of the text.
Extracted Text:
{content}

The available courses are:
{courses}

Please choose the best matching course from the list above that fits the detected course.
Return exactly the course name as it appears in the list, or return "{no_match}" if none match.
Return your answer with exactly two lines in the format:
Subject:<Extracted course name>
Course Folder:<Matching lecture folder name>
<|Assistant|>
""",
    "classify_json": """<|User|> Below is text extracted from a PDF.
Please identify the academic course name of the text and choose the best matching course from the list.

Extracted Text:
{content}

The available courses are:
{courses}

The value of "course_folder" must be copied exactly as it appears in the list, or be "{no_match}" if none match.
Return a JSON object with keys "subject" and "course_folder".
Example: {{"subject": "Quantum Mechanics", "course_folder": "Quantum Computing"}}
<|Assistant|>
""",
    "summarize": """<|User|> Summarize the following text in a short paragraph with 3-5 sentences.

{content}
<|Assistant|>
""",
}
