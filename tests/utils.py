import re


def clean_cli_output(output: str) -> str:
    """
    Remove ANSI escape codes, Rich box characters and all whitespace from CLI
    output to make assertions robust against terminal wrapping.
    """
    ansi_escape = re.compile(r"\x1B(?:[@-Z\\-_]|\[[0-?]*[ -/]*[@-~])")
    output = ansi_escape.sub("", output)
    return re.sub(r"[\s│╭╮╰╯─]", "", output)
