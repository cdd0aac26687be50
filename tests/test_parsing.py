from brand_quiz.parsing import (
    FINAL_SECTION_FIELDS, parse_step_results, parse_final_report, extract_list, extract_sections, extract_title,
)
from brand_quiz.prompts import STEP1, STEP2, FINAL_SECTION_HEADERS

from conftest import STEP1_TEXT, STEP2_TEXT, FINAL_TEXT


def test_step1_titles_follow_marker_order():
    text = ("SUMMARY 1: [MARKET LEADER] ... SUMMARY 2: [NICHE SPECIALIST] ... "
            "SUMMARY 3: [HYBRID INNOVATOR] ...")
    artifacts = parse_step_results(text, STEP1, 'some/model')
    assert [a.title for a in artifacts] == ['MARKET LEADER', 'NICHE SPECIALIST', 'HYBRID INNOVATOR']


def test_step_artifacts_carry_tag_model_and_content():
    artifacts = parse_step_results(STEP2_TEXT, STEP2, 'some/model')
    assert len(artifacts) == 3
    first = artifacts[0].model_dump(by_alias=True)
    assert first['title'] == 'REGIONAL MARKET DOMINATION'
    assert first['promptTag'] == 'step2_market_analysis'
    assert first['modelName'] == 'some/model'
    assert 'chamber partnerships' in first['content']
    assert first['generatedAt']


def test_missing_brackets_fall_back_to_numbered_titles():
    text = "SUMMARY 1: a plain profile\nSUMMARY 2: another plain profile"
    artifacts = parse_step_results(text, STEP1, 'm')
    assert [a.title for a in artifacts] == ['Personal Brand Profile 1', 'Personal Brand Profile 2']


def test_bracket_below_first_line_is_not_a_title():
    text = "STRATEGY 1: overview first\n[NOT A TITLE]\nmore text"
    (artifact,) = parse_step_results(text, STEP2, 'm')
    assert artifact.title == 'Market Positioning Strategy 1'


def test_extra_segments_are_dropped():
    text = STEP1_TEXT + "\nSUMMARY 4: [BONUS]\nUnrequested fourth profile."
    artifacts = parse_step_results(text, STEP1, 'm')
    assert len(artifacts) == 3
    assert 'BONUS' not in artifacts[-1].content


def test_text_without_markers_yields_nothing():
    assert parse_step_results("I cannot help with that.", STEP1, 'm') == []
    assert parse_step_results('', STEP2, 'm') == []


def test_markdown_around_marker_is_stripped():
    text = "**SUMMARY 1: [MARKET LEADER]**\nBody text.\n\n**SUMMARY 2: [NICHE SPECIALIST]**\nMore."
    artifacts = parse_step_results(text, STEP1, 'm')
    assert artifacts[0].content.startswith('[MARKET LEADER]')
    assert artifacts[0].content.endswith('Body text.')


def test_extract_title_reads_first_line_only():
    assert extract_title(' [TITLE]\nbody') == 'TITLE'
    assert extract_title('') is None


def test_full_final_report():
    report = parse_final_report(FINAL_TEXT)
    assert report.brand_position == ('I help growing businesses turn scattered messaging '
                                     'into a brand people remember.')
    assert report.hero_slogans == ['Clarity that converts', 'Your story, sharpened', 'Brands people remember']
    assert report.key_differentiators == ["Corporate rigour with a founder's pace", 'Measurable brand outcomes']
    assert report.success_indicators == ['10 discovery calls per month', '3 signed retainers']
    assert report.launch_roadmap.startswith('Month one')
    assert report.premium_services == 'Brand sprint workshops and quarterly messaging audits.'
    assert report.business_model.endswith('remote delivery.')
    assert not report.is_empty()


def test_final_report_serializes_camel_case():
    data = parse_final_report(FINAL_TEXT).to_dict()
    assert set(data) == {
        'brandPosition', 'strengthsMatrix', 'heroSlogans', 'keyDifferentiators', 'brandVoice',
        'idealClientAvatar', 'marketAnalysis', 'competitiveMapping', 'launchRoadmap',
        'premiumServices', 'successIndicators', 'businessModel', 'generatedAt',
    }


def test_missing_header_leaves_only_that_field_empty():
    text = FINAL_TEXT.replace(
        "6. IDEAL CLIENT AVATAR\nA founder of a 10-50 person company who is tired of inconsistent messaging.\n\n", ""
    )
    report = parse_final_report(text)
    assert report.ideal_client_avatar == ''
    assert report.brand_voice == 'Warm, direct and practical.'
    assert report.market_analysis.startswith('North American')

    present = [field for field, _ in FINAL_SECTION_FIELDS.values() if field != 'ideal_client_avatar']
    assert len(present) == 11
    for field in present:
        assert getattr(report, field), field


def test_missing_list_section_is_empty_list():
    text = FINAL_TEXT.replace("3. HERO SLOGANS & TAGLINES", "3. SOMETHING ELSE")
    assert parse_final_report(text).hero_slogans == []


def test_malformed_final_text_gives_empty_report():
    report = parse_final_report("The model wandered off and wrote a poem instead.")
    assert report.is_empty()
    assert report.key_differentiators == []


def test_header_markdown_and_hint_are_stripped():
    text = ("**UNIQUE BRAND POSITION STATEMENT** (2-3 sentences)\nSharp positioning.\n\n"
            "**CORE STRENGTHS MATRIX**\nStrengths.")
    sections = extract_sections(text)
    assert sections['UNIQUE BRAND POSITION STATEMENT'] == 'Sharp positioning.'
    assert sections['CORE STRENGTHS MATRIX'] == 'Strengths.'


def test_sections_slice_to_next_header_found():
    sections = extract_sections(FINAL_TEXT)
    assert set(sections) == set(FINAL_SECTION_HEADERS)
    assert 'CORE STRENGTHS' not in sections['UNIQUE BRAND POSITION STATEMENT']


def test_extract_list_markers():
    block = "- dash item\n• bullet item\n* star item\n1. numbered item\nstray line"
    assert extract_list(block) == ['dash item', 'bullet item', 'star item', 'numbered item']


def test_extract_list_without_markers_keeps_block():
    assert extract_list("Just one paragraph.") == ['Just one paragraph.']


def test_extract_list_empty_block():
    assert extract_list('') == []
    assert extract_list(None) == []
