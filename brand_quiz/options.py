"""
Option sets for every enumerated quiz and rating field.

These tuples are the single source of truth: the pydantic submission models
build their ``Literal`` types from them, the persisted records are only ever
written from validated submissions, and ``GET /quiz/options`` serves them to
the client.
"""

JOB_STATUSES = (
    'Student',
    'Full-time Employee',
    'Part-time Employee',
    'Freelancer',
    'Entrepreneur with Existing Business',
    'Between Jobs',
    'Retired',
)

INDUSTRIES = (
    'Coaching & Consulting',
    'Marketing & Advertising',
    'Technology & IT',
    'Health & Wellness',
    'Education & Training',
    'E-commerce & Retail',
    'Finance & Investment',
    'Real Estate',
    'Design & Creative',
    'Content Creation',
    'Project Management',
    'Human Resources',
    'Sales',
    'Hospitality',
    'Trades & Crafts',
    'Other',
    'Let AI Decide ✨',
)

EXPERIENCE_LEVELS = (
    'Less than 2 years',
    '2-5 years',
    '5-10 years',
    '10-15 years',
    'Over 15 years',
)

EDUCATION_BACKGROUNDS = (
    'Self-taught/Career Changer',
    'Vocational Training',
    "Bachelor's Degree",
    "Master's Degree",
    'PhD/Doctorate',
    'Multiple Degrees',
)

GEOGRAPHIC_LOCATIONS = (
    'North America',
    'Europe',
    'Asia-Pacific',
    'Latin America',
    'Middle East & Africa',
    'Other',
)

CITY_MARKET_SIZES = (
    'Major Metropolitan (1M+)',
    'Mid-size City (100K-1M)',
    'Small City (10K-100K)',
    'Rural/Small Town (<10K)',
)

TIME_AVAILABILITY = (
    'Less than 5 hours',
    '5-10 hours',
    '10-20 hours',
    '20-30 hours',
    'More than 30 hours per week',
)

BUDGET_RANGES = (
    'Under $50',
    '$50-150',
    '$150-500',
    '$500-1000',
    'Over $1000 monthly',
)

TECH_COMFORT_LEVELS = (
    'Early Adopter - I try everything new',
    'Tech Enthusiast - I learn eagerly',
    'Cautious but Open - I need proven results',
    'Traditional - I prefer established methods',
)

SUPPORT_SYSTEMS = (
    'Working completely alone',
    'Family/Friends support me',
    'I have mentors or coaches',
    "I'm part of a community",
    'I have a small team',
)

CORE_SKILLS = (
    'Subject Matter Expertise',
    'Communication & Presentation',
    'Problem Solving & Analysis',
    'Strategic Thinking',
    'Creativity & Innovation',
    'Technical Understanding',
    'Project Management',
    'Sales & Business Development',
    'Leadership & Team Management',
    'Empathy & People Skills',
)

FOCUS_AREAS = (
    'Personal Development',
    'Business & Entrepreneurship',
    'Marketing & Sales',
    'Technology & Innovation',
    'Health & Lifestyle',
    'Education & Knowledge',
    'Creativity & Design',
    'Sustainability & Environment',
    'Finance & Investment',
    'Leadership & Management',
    'Other',
)

# focusArea value that makes customFocus mandatory
CUSTOM_FOCUS_TRIGGER = 'Other'

PRIMARY_GOALS = (
    'Help others succeed',
    'Be recognized as an expert',
    'Create new career opportunities',
    'Build side income ($500-2000/month)',
    'Become fully self-employed',
    'Scale existing business',
    'Achieve financial independence',
)

TIMELINES = (
    'Within 3 months',
    'Within 6 months',
    'Within 12 months',
    "I'm building long-term (2+ years)",
)

RATING_TYPES = (
    'step1_result',
    'step2_result',
    'final_result',
    'brand_position',
    'strengths_matrix',
    'hero_slogans',
    'differentiators',
    'brand_voice',
    'client_avatar',
    'market_analysis',
    'competitive_mapping',
    'launch_roadmap',
    'premium_services',
    'business_model',
)

CONFIDENCE_LEVELS = (
    'Very confident - I can implement immediately',
    'Confident - I understand the strategy',
    'Somewhat confident - I need more guidance',
    'Not confident - This feels overwhelming',
    'Uncertain - I need professional help',
)

CATEGORY_RATING_FIELDS = ('accuracy', 'relevance', 'actionability', 'creativity', 'marketFit')
FEEDBACK_FIELDS = ('liked', 'disliked', 'improvements')


def all_options():
    """Option sets keyed by the camelCase field name the client submits."""
    return {
        'jobStatus': list(JOB_STATUSES),
        'industryPreference': list(INDUSTRIES),
        'experienceLevel': list(EXPERIENCE_LEVELS),
        'educationBackground': list(EDUCATION_BACKGROUNDS),
        'geographicLocation': list(GEOGRAPHIC_LOCATIONS),
        'cityMarketSize': list(CITY_MARKET_SIZES),
        'timeAvailability': list(TIME_AVAILABILITY),
        'budgetRange': list(BUDGET_RANGES),
        'techComfort': list(TECH_COMFORT_LEVELS),
        'supportSystem': list(SUPPORT_SYSTEMS),
        'coreSkills': list(CORE_SKILLS),
        'focusArea': list(FOCUS_AREAS),
        'primaryGoals': list(PRIMARY_GOALS),
        'timeline': list(TIMELINES),
        'ratingType': list(RATING_TYPES),
        'confidenceLevel': list(CONFIDENCE_LEVELS),
    }
