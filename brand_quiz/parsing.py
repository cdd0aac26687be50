"""
Turns generated text into artifacts and report fields.

The parser has no semantic understanding of the text. It looks for the
literal markers the prompts ask for (``SUMMARY 1:``, ``STRATEGY 2:``, the
twelve report headers) and slices between them. Output that ignores the
convention produces fewer artifacts or empty report fields; these functions
never raise on malformed text; callers decide whether an empty parse is a
failure.
"""
import re
from typing import List

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from .models import utcnow
from .prompts import STEP1, STEP2, FINAL_SECTION_HEADERS

MAX_ARTIFACTS = 3

STEP_MARKERS = {
    STEP1: re.compile(r'SUMMARY\s+\d+\s*:'),
    STEP2: re.compile(r'STRATEGY\s+\d+\s*:'),
}
PROMPT_TAGS = {
    STEP1: 'step1_profile_analysis',
    STEP2: 'step2_market_analysis',
}
FALLBACK_TITLES = {
    STEP1: 'Personal Brand Profile {}',
    STEP2: 'Market Positioning Strategy {}',
}

_BRACKETED_TITLE = re.compile(r'\[([^\]\n]+)\]')
_LIST_MARKER = re.compile(r'^(?:[-•*]|\d+\.)\s+')
# Only touches the header's own line, so a list's first bullet survives
_LEADING_NOISE = re.compile(r'^[ \t:*#]*(?:\([^)\n]*\))?[ \t:*#]*(?:\d{1,2}\.[ \t]+)?')
# Numbering (and markdown emphasis) that belongs to the next header
_TRAILING_NUMBERING = re.compile(r'(?:\n[\s#*]*\d{1,2}\.)?[\s#*]*$')


class _Camel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class GeneratedArtifact(_Camel):
    title: str
    content: str
    generated_at: str = Field(default_factory=lambda: utcnow().isoformat())
    prompt_tag: str
    model_name: str


class FinalReport(_Camel):
    brand_position: str = ''
    strengths_matrix: str = ''
    hero_slogans: List[str] = Field(default_factory=list)
    key_differentiators: List[str] = Field(default_factory=list)
    brand_voice: str = ''
    ideal_client_avatar: str = ''
    market_analysis: str = ''
    competitive_mapping: str = ''
    launch_roadmap: str = ''
    premium_services: str = ''
    success_indicators: List[str] = Field(default_factory=list)
    business_model: str = ''
    generated_at: str = Field(default_factory=lambda: utcnow().isoformat())

    def is_empty(self):
        return not any(
            value for name, value in self if name != 'generated_at'
        )

    def to_dict(self):
        return self.model_dump(by_alias=True)


# Report field fed by each header, and whether it holds a list
FINAL_SECTION_FIELDS = dict(zip(FINAL_SECTION_HEADERS, (
    ('brand_position', False),
    ('strengths_matrix', False),
    ('hero_slogans', True),
    ('key_differentiators', True),
    ('brand_voice', False),
    ('ideal_client_avatar', False),
    ('market_analysis', False),
    ('competitive_mapping', False),
    ('launch_roadmap', False),
    ('premium_services', False),
    ('success_indicators', True),
    ('business_model', False),
)))


def extract_title(segment):
    """Returns the bracketed title on the segment's first line, or None."""
    first_line = segment.strip().split('\n', 1)[0] if segment.strip() else ''
    match = _BRACKETED_TITLE.search(first_line)
    return match.group(1).strip() if match else None


def parse_step_results(text, phase, model_name):
    """Splits step-level output into at most three artifacts, in marker order."""
    segments = STEP_MARKERS[phase].split(text or '')[1:]
    artifacts = []
    for number, segment in enumerate(segments[:MAX_ARTIFACTS], start=1):
        content = segment.strip(' \t\r\n*#')
        artifacts.append(GeneratedArtifact(
            title=extract_title(content) or FALLBACK_TITLES[phase].format(number),
            content=content,
            prompt_tag=PROMPT_TAGS[phase],
            model_name=model_name,
        ))
    return artifacts


def extract_sections(text, headers=FINAL_SECTION_HEADERS):
    """
    Maps each header found in ``text`` to the text between it and the next
    header found after it. Headers that are absent are left out.
    """
    text = text or ''
    positions = []
    for header in headers:
        index = text.find(header)
        if index != -1:
            positions.append((index, header))
    positions.sort()

    sections = {}
    for i, (index, header) in enumerate(positions):
        start = index + len(header)
        end = positions[i + 1][0] if i + 1 < len(positions) else len(text)
        body = text[start:end]
        body = _TRAILING_NUMBERING.sub('', body)
        body = _LEADING_NOISE.sub('', body, count=1)
        sections[header] = body.strip()
    return sections


def extract_list(block):
    """Bulleted or numbered lines with their markers removed; falls back to the whole block."""
    block = (block or '').strip()
    if not block:
        return []
    items = []
    for line in block.split('\n'):
        stripped = line.strip()
        if _LIST_MARKER.match(stripped):
            items.append(_LIST_MARKER.sub('', stripped, count=1).strip())
    return items or [block]


def parse_final_report(text):
    sections = extract_sections(text)
    values = {}
    for header, (field, is_list) in FINAL_SECTION_FIELDS.items():
        body = sections.get(header, '')
        values[field] = extract_list(body) if is_list else body
    return FinalReport(**values)
