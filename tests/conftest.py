import pytest

from brand_quiz import create_app, db
from config import TestingConfig

STEP1_TEXT = """SUMMARY 1: [MARKET LEADER]
Position yourself as the go-to brand strategist for growing businesses in your metro area.

SUMMARY 2: [NICHE SPECIALIST]
Own brand messaging for B2B software founders who have outgrown their first website.

SUMMARY 3: [HYBRID INNOVATOR]
Blend campaign experience with AI-assisted content systems for lean marketing teams.
"""

STEP2_TEXT = """STRATEGY 1: [REGIONAL MARKET DOMINATION]
Win the local SMB market through chamber partnerships and referral events.

STRATEGY 2: [DIGITAL-FIRST GLOBAL REACH]
Package brand sprints as a productised online offer sold through LinkedIn content.

STRATEGY 3: [HYBRID LOCAL-GLOBAL APPROACH]
Anchor credibility with local clients, then scale the method through remote workshops.
"""

FINAL_TEXT = """1. UNIQUE BRAND POSITION STATEMENT
I help growing businesses turn scattered messaging into a brand people remember.

2. CORE STRENGTHS MATRIX
Strategic thinking applied to campaign planning.

3. HERO SLOGANS & TAGLINES
- Clarity that converts
- Your story, sharpened
- Brands people remember

4. KEY DIFFERENTIATORS
1. Corporate rigour with a founder's pace
2. Measurable brand outcomes

5. BRAND VOICE & MESSAGING
Warm, direct and practical.

6. IDEAL CLIENT AVATAR
A founder of a 10-50 person company who is tired of inconsistent messaging.

7. REGIONAL MARKET ANALYSIS
North American SMB demand for brand strategy is growing.

8. COMPETITIVE LANDSCAPE MAPPING
Agencies are expensive; freelancers rarely bring strategy.

9. 90-DAY LAUNCH ROADMAP
Month one: publish the positioning and book ten discovery calls.

10. PREMIUM SERVICE OFFERINGS
Brand sprint workshops and quarterly messaging audits.

11. SUCCESS INDICATORS & KPIS
• 10 discovery calls per month
• 3 signed retainers

12. REGIONAL BUSINESS MODEL RECOMMENDATIONS
Retainer-based advisory for metro clients with remote delivery.
"""


class FakeGenerationClient:
    """Scripted stand-in for GenerationClient. A response that is an exception is raised instead."""
    model_name = 'test/fake-model'

    def __init__(self):
        self.responses = {'step1': STEP1_TEXT, 'step2': STEP2_TEXT, 'final': FINAL_TEXT}
        self.ping_response = 'AI service is working correctly.'
        self.calls = []

    def generate(self, phase, prompt):
        self.calls.append((phase, prompt))
        response = self.responses[phase]
        if isinstance(response, Exception):
            raise response
        return response

    def ping(self):
        if isinstance(self.ping_response, Exception):
            raise self.ping_response
        return self.ping_response


def make_step1_payload(session_id, **overrides):
    payload = {
        'sessionId': session_id,
        'jobStatus': 'Full-time Employee',
        'industryPreference': 'Marketing & Advertising',
        'experienceLevel': '5-10 years',
        'educationBackground': "Bachelor's Degree",
        'geographicLocation': 'North America',
        'cityMarketSize': 'Major Metropolitan (1M+)',
        'timeAvailability': '10-20 hours',
        'budgetRange': '$150-500',
        'techComfort': 'Tech Enthusiast - I learn eagerly',
        'supportSystem': 'I have mentors or coaches',
        'coreSkills': ['Communication & Presentation', 'Strategic Thinking', 'Creativity & Innovation'],
        'uniqueExperiences': 'Led a successful rebranding campaign for a mid-size company that '
                             'increased brand recognition by 40% and drove 25% more leads.',
        'passionsInterests': "I'm passionate about helping businesses tell their story authentically.",
        'focusArea': 'Marketing & Sales',
        'primaryGoals': ['Be recognized as an expert', 'Build side income ($500-2000/month)'],
        'timeline': 'Within 6 months',
        'biggestConcerns': 'Standing out in a crowded market and finding my unique voice.',
    }
    payload.update(overrides)
    return payload


def make_step2_payload(session_id, **overrides):
    payload = {
        'sessionId': session_id,
        'problemsToSolve': 'Many small businesses struggle with inconsistent messaging and lack '
                           'a clear brand strategy that resonates with their audience.',
        'idealTargetGroup': 'Small to medium business owners, entrepreneurs, and marketing managers '
                            'who want stronger brands but lack the expertise.',
        'industryTrendsImpact': 'Digital transformation has made brand consistency more important, '
                                'while AI tools change how content is created.',
        'uniqueAdvantages': 'I combine corporate experience with entrepreneurial insight.',
        'marketChallenges': 'The market is saturated with marketing consultants.',
    }
    payload.update(overrides)
    return payload


@pytest.fixture
def generator():
    return FakeGenerationClient()


@pytest.fixture
def app(generator):
    app = create_app(TestingConfig, generation_client=generator)
    yield app
    with app.app_context():
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def session_id(client):
    response = client.post('/quiz/start')
    return response.get_json()['data']['sessionId']


@pytest.fixture
def completed_session_id(client, session_id):
    client.post('/quiz/step1', json=make_step1_payload(session_id))
    client.post('/quiz/step2', json=make_step2_payload(session_id))
    client.post('/quiz/generate-final-results', json={'sessionId': session_id})
    return session_id


@pytest.fixture
def admin_headers(client):
    response = client.post('/auth/login', json={'password': TestingConfig.AUTH_PASSWORD})
    token = response.get_json()['data']['accessToken']
    return {'Authorization': f'Bearer {token}'}
