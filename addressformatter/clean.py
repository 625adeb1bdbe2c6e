import re
from typing import List

from .model import Template

WHITESPACE_BEFORE_NEWLINE = re.compile(r'\s*\n')
MULTIPLE_SPACES = re.compile(r'  +')
EMPTY_SEGMENT = re.compile(r',[ \t]*(?=,)')
DANGLING_SEPARATORS = re.compile(r'^[\s,\-]+|[\s,\-]+$')

# "New York, New York" is a legitimate repetition
REPEATABLE_SEGMENTS = frozenset(['new york'])


def remove_duplicate_segments(line:str) -> str:
    seen = set()
    segments = []
    for segment in line.split(','):
        key = segment.strip().lower()
        if key in seen:
            continue
        if key not in REPEATABLE_SEGMENTS:
            seen.add(key)
        segments.append(segment)
    return ','.join(segments)


def clean_line(line:str) -> str:
    """Strip dangling separators and repeated segments until nothing changes"""
    while True:
        cleaned = EMPTY_SEGMENT.sub('', line)
        cleaned = DANGLING_SEPARATORS.sub('', cleaned)
        cleaned = remove_duplicate_segments(cleaned)
        cleaned = DANGLING_SEPARATORS.sub('', cleaned)
        if cleaned == line:
            return cleaned
        line = cleaned


def clean(text:str) -> str:
    """
    Clean up a rendered address

    Collapses whitespace, removes dangling separators, empty and duplicate
    lines and duplicate comma separated parts of a line.

    :param text: rendered address
    :returns: cleaned address, idempotent
    """
    text = WHITESPACE_BEFORE_NEWLINE.sub('\n', text)
    text = MULTIPLE_SPACES.sub(' ', text)

    lines = []  # type: List[str]
    for line in text.split('\n'):
        line = clean_line(line)
        if line == '' or line in lines:
            continue
        lines.append(line)

    return '\n'.join(lines).strip()


def apply_postformat(text:str, template:Template) -> str:
    for rule in template.postformat_replace:
        text = rule.apply(text)
    return text
