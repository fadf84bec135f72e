from setuptools import setup, find_packages

setup(
    name="nlsh",
    version="1.0.0",
    description="nlsh: natural language to shell commands, powered by a local Ollama model.",
    long_description="""nlsh features:
- One-shot: nlsh "install pandas" prints the command, -e runs it
- Interactive shell with built-ins (pwd, cd, gst, config) and autocomplete
- Prompt tuned per platform: bash on Linux/macOS, PowerShell on Windows
- Output sanitizer strips markdown fences, backticks and stray quotes
- Safety gate: length bound, remote fetch-and-run patterns, catastrophic-command denylist
- cd handled in-process so the session directory never drifts
""",
    packages=find_packages(exclude=["tests", "tests.*"]),
    include_package_data=True,
    install_requires=[
        "rich>=13.7.0",
        "click>=8.1.0",
        "prompt_toolkit>=3.0.0",
        "requests>=2.31.0",
    ],
    extras_require={
        "test": ["pytest>=7.0"],
    },
    entry_points={
        "console_scripts": [
            "nlsh=nlsh.CLI:main",
        ],
    },
    python_requires=">=3.9",
    classifiers=[
        "Programming Language :: Python :: 3",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
    ],
)
