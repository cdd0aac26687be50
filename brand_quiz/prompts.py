"""
Prompt templates for the three generation phases.

``build_prompt`` is a pure function of the stored (camelCase) answer dicts.
The approach names and the final-report headers written here are the same
literals the parser in ``parsing.py`` searches for.
"""

STEP1 = 'step1'
STEP2 = 'step2'
FINAL = 'final'
PHASES = (STEP1, STEP2, FINAL)

STEP1_APPROACHES = ('MARKET LEADER', 'NICHE SPECIALIST', 'HYBRID INNOVATOR')
STEP2_APPROACHES = ('REGIONAL MARKET DOMINATION', 'DIGITAL-FIRST GLOBAL REACH', 'HYBRID LOCAL-GLOBAL APPROACH')

# Order matters: the report is requested, and parsed, in this sequence.
FINAL_SECTION_HEADERS = (
    'UNIQUE BRAND POSITION STATEMENT',
    'CORE STRENGTHS MATRIX',
    'HERO SLOGANS & TAGLINES',
    'KEY DIFFERENTIATORS',
    'BRAND VOICE & MESSAGING',
    'IDEAL CLIENT AVATAR',
    'REGIONAL MARKET ANALYSIS',
    'COMPETITIVE LANDSCAPE MAPPING',
    '90-DAY LAUNCH ROADMAP',
    'PREMIUM SERVICE OFFERINGS',
    'SUCCESS INDICATORS & KPIS',
    'REGIONAL BUSINESS MODEL RECOMMENDATIONS',
)

FINAL_SECTION_HINTS = (
    '2-3 sentences',
    '4-5 key strengths with market applications',
    '3-5 memorable options',
    '3-4 unique positioning elements',
    'tone, style, key messages',
    'detailed persona with regional context',
    'size, trends, opportunities',
    'key competitors and positioning gaps',
    'specific action steps',
    '3-4 monetization strategies',
    'measurable goals',
    'specific to location and market',
)

SYSTEM_INSTRUCTIONS = {
    STEP1: (
        "You are a world-class personal branding strategist with deep expertise in market research, "
        "regional business dynamics, and cultural considerations. You create comprehensive, actionable "
        "brand positioning strategies that are both globally relevant and locally optimized.\n\n"
        "Your responses must be professional, insightful, and immediately actionable. Focus on practical "
        "strategies rather than generic advice. Always consider regional market dynamics, cultural factors, "
        "and local competition when making recommendations.\n\n"
        "Generate exactly 3 distinct Personal Brand Profile Summaries, each focusing on different strategic "
        "angles based on the user's profile. Start each one with its label exactly as requested, for example "
        "\"SUMMARY 1: [MARKET LEADER]\"."
    ),
    STEP2: (
        "You are an expert market research analyst and business strategist with deep knowledge of global "
        "markets, regional business landscapes, and competitive intelligence. You specialize in identifying "
        "market opportunities, analyzing competitive landscapes, and developing go-to-market strategies that "
        "account for local market dynamics.\n\n"
        "Your analysis must be data-driven, regionally informed, and strategically sound.\n\n"
        "Generate exactly 3 distinct Market Positioning Strategies, each offering a different market approach. "
        "Start each one with its label exactly as requested, for example "
        "\"STRATEGY 1: [REGIONAL MARKET DOMINATION]\"."
    ),
    FINAL: (
        "You are the world's leading personal branding and business strategy consultant, combining deep "
        "market research expertise with practical implementation experience. You create comprehensive brand "
        "positioning strategies that integrate personal strengths, market opportunities, and regional "
        "dynamics into actionable business plans.\n\n"
        "Generate a comprehensive final brand positioning report with all required sections. Use the section "
        "headings exactly as written, in the given order, and format list sections as one item per line "
        "starting with \"- \"."
    ),
}


def _join(values):
    return ', '.join(values or [])


def _not_specified(value):
    return value or 'Not specified'


def _focus(step1):
    focus = step1.get('focusArea', '')
    if step1.get('customFocus'):
        focus = f"{focus} ({step1['customFocus']})"
    return focus


def _step1_prompt(step1):
    return f"""Analyze this personal profile and create 3 distinct Personal Brand Profile Summaries:

PERSONAL PROFILE:
Current Situation:
- Job Status: {step1.get('jobStatus')}
- Industry Preference: {step1.get('industryPreference')}
- Experience Level: {step1.get('experienceLevel')}
- Education: {step1.get('educationBackground')}
- Geographic Location: {step1.get('geographicLocation')}
- Market Size: {step1.get('cityMarketSize')}
- Time Availability: {step1.get('timeAvailability')}
- Budget Range: {step1.get('budgetRange')}
- Tech Comfort: {step1.get('techComfort')}
- Support System: {step1.get('supportSystem')}

Skills & Strengths:
- Core Skills: {_join(step1.get('coreSkills'))}
- Unique Experiences: {step1.get('uniqueExperiences')}
- Passions & Interests: {step1.get('passionsInterests')}

Goals & Vision:
- Focus Area: {_focus(step1)}
- Primary Goals: {_join(step1.get('primaryGoals'))}
- Timeline: {step1.get('timeline')}
- Biggest Concerns: {step1.get('biggestConcerns')}

Please create 3 comprehensive Personal Brand Profile Summaries, each focusing on a different strategic approach:

SUMMARY 1: [{STEP1_APPROACHES[0]}]
- Brand archetype and positioning
- Unique value proposition
- Target audience definition
- Key differentiators
- Regional market context and opportunities
- Competitive advantages
- Implementation priority

SUMMARY 2: [{STEP1_APPROACHES[1]}]
- Specialized positioning strategy
- Unique value proposition for the niche
- Niche audience identification
- Expert authority differentiators
- Regional specialization opportunities
- Competitive differentiation
- Implementation priority

SUMMARY 3: [{STEP1_APPROACHES[2]}]
- Multi-faceted positioning
- Cross-industry value proposition
- Diverse audience approach
- Innovation differentiators
- Regional adaptation strategies
- Unique competitive advantages
- Implementation priority

Each summary should be 200-250 words and provide specific, actionable insights tailored to the user's profile and regional market context."""


def _step2_prompt(step1, step2):
    return f"""Based on this comprehensive profile and market research, create 3 distinct Market Positioning Strategies:

PERSONAL PROFILE SUMMARY:
- Industry: {step1.get('industryPreference')}
- Experience: {step1.get('experienceLevel')}
- Location: {step1.get('geographicLocation')} ({step1.get('cityMarketSize')})
- Focus Area: {_focus(step1)}
- Goals: {_join(step1.get('primaryGoals'))}
- Budget: {step1.get('budgetRange')}
- Timeline: {step1.get('timeline')}

MARKET RESEARCH DATA:
- Problems to Solve: {step2.get('problemsToSolve')}
- Target Audience: {step2.get('idealTargetGroup')}
- Industry Trends Impact: {step2.get('industryTrendsImpact')}
- Unique Advantages: {step2.get('uniqueAdvantages')}
- Market Challenges: {step2.get('marketChallenges')}
- Regional Considerations: {_not_specified(step2.get('regionalConsiderations'))}
- Competitive Landscape: {_not_specified(step2.get('competitiveLandscape'))}

Create 3 comprehensive Market Positioning Strategies:

STRATEGY 1: [{STEP2_APPROACHES[0]}]
- Regional market analysis and size
- Local competition assessment
- Cultural adaptation requirements
- Regional business model recommendations
- Local partnership opportunities
- Market entry timeline
- Revenue potential analysis

STRATEGY 2: [{STEP2_APPROACHES[1]}]
- Digital market opportunities
- Online competition analysis
- Global vs local balance
- Platform-specific strategies
- International market considerations
- Scalability assessment
- Technology requirements

STRATEGY 3: [{STEP2_APPROACHES[2]}]
- Multi-market positioning
- Local expertise with global reach
- Regional hub strategy
- Cross-market opportunities
- Cultural bridge positioning
- International expansion plan
- Competitive differentiation

Each strategy should be 250-300 words and include specific market insights, competitive analysis, and actionable recommendations based on regional and global market dynamics."""


def _final_prompt(step1, step2):
    sections = '\n'.join(
        f"{number}. {header} ({hint})"
        for number, (header, hint) in enumerate(zip(FINAL_SECTION_HEADERS, FINAL_SECTION_HINTS), start=1)
    )
    return f"""Create a comprehensive Personal Brand Positioning Strategy based on this complete profile:

COMPLETE PROFILE:
Personal Foundation:
- Industry: {step1.get('industryPreference')}
- Experience: {step1.get('experienceLevel')}
- Location: {step1.get('geographicLocation')} ({step1.get('cityMarketSize')})
- Skills: {_join(step1.get('coreSkills'))}
- Goals: {_join(step1.get('primaryGoals'))}
- Timeline: {step1.get('timeline')}
- Budget: {step1.get('budgetRange')}

Market Intelligence:
- Target Problems: {step2.get('problemsToSolve')}
- Ideal Audience: {step2.get('idealTargetGroup')}
- Market Trends: {step2.get('industryTrendsImpact')}
- Unique Advantages: {step2.get('uniqueAdvantages')}
- Challenges: {step2.get('marketChallenges')}

Generate a complete brand positioning strategy with these specific sections:

{sections}

Make each section specific, actionable, and tailored to the user's unique profile and regional market context. Focus on practical implementation rather than generic advice."""


def build_prompt(phase, step1, step2=None):
    """Renders the user prompt for a generation phase from stored answers."""
    if phase == STEP1:
        return _step1_prompt(step1)
    if phase == STEP2:
        return _step2_prompt(step1, step2 or {})
    if phase == FINAL:
        return _final_prompt(step1, step2 or {})
    raise ValueError(f"Unknown generation phase: {phase}")


def system_instruction(phase):
    return SYSTEM_INSTRUCTIONS[phase]
