"""
nlsh · prompt.py
Instruction text sent to the model. Deterministic: the same request,
platform and directory always give the same prompt.
"""
from __future__ import annotations

from pathlib import Path
from typing import List, Tuple, Union

from nlsh.profiles import Platform, ShellProfile, profile_for

_TEMPLATE = """You are a {dialect} command generator. Current directory: {cwd}

RULES:
1. Output ONLY ONE simple command. NO explanations, NO markdown, NO code blocks.
2. Keep it SIMPLE. Do NOT generate complex scripts or chained commands.
3. Package installation:
   - Python packages: pip install PACKAGE_NAME
   - Node packages: npm install PACKAGE_NAME
   - NEVER use Install-Module, Invoke-WebRequest, or download scripts
4. Navigation: ONLY when user says "go to X", "cd to X", "navigate to X" -> cd X
5. File operations:
   - "open file X" -> {open_file}
   - "create file X" -> {create_file}
   - "create folder X" -> {create_folder}
6. Python commands:
   - "python print hello" -> python -c "print('hello')"
   - "run python script.py" -> python script.py
   - "execute python code X" -> python -c "X"
   - "run test.py" -> python test.py
7. Git commands:
   - "git status" -> git status
   - "commit all changes with message X" -> git add . {chain} git commit -m "X"
   - "create branch X" -> git checkout -b X
   - "switch to branch X" -> git checkout X
   - "push changes" -> git push
   - "pull latest" -> git pull
   - "show commits" or "commit history" -> git log --oneline -10{chain_note}
8. Greetings: "hi"/"hello" -> {greeting}

EXAMPLES:
{examples}

User request: {request}
Command:"""


def _examples(p: ShellProfile) -> List[Tuple[str, str]]:
    return [
        ("install pandas", "pip install pandas"),
        ("install express", "npm install express"),
        ("python print hello", "python -c \"print('hello')\""),
        ("run test.py", "python test.py"),
        ("commit all with message 'fix'", f'git add . {p.chain} git commit -m "fix"'),
        ("create branch dev", "git checkout -b dev"),
        ("create file test.txt", p.create_file.format(name="test.txt")),
        ("create folder data", p.create_folder.format(name="data")),
        ("go to src", "cd src"),
    ]


def build_prompt(user_text: str, platform: Platform,
                 working_directory: Union[str, Path]) -> str:
    p = profile_for(platform)
    examples = "\n".join(f'- User: "{q}" -> {a}' for q, a in _examples(p))
    return _TEMPLATE.format(
        dialect=p.dialect,
        cwd=str(working_directory),
        open_file=p.open_file.format(name="X"),
        create_file=p.create_file.format(name="X"),
        create_folder=p.create_folder.format(name="X"),
        chain=p.chain,
        chain_note=f"\n   NOTE: {p.chain_note}" if p.chain_note else "",
        greeting=p.greeting,
        examples=examples,
        request=user_text.strip(),
    )
