"""
ThreatLens Constants - Central location for ALL constant values.
"""

from typing import Dict, List, Tuple

# APPLICATION INFO
APP_NAME: str = "ThreatLens"
APP_FULL_NAME: str = "ThreatLens Message Threat Classifier"
APP_VERSION: str = "1.0.0"
APP_DESCRIPTION: str = "Sentiment-model threat classification with rule-based enhancement"

# CLASSIFIER
DEFAULT_CLASSIFIER_MODEL: str = "distilbert-base-uncased-finetuned-sst-2-english"
DEFAULT_CLASSIFIER_TASK: str = "text-classification"
NEGATIVE_SENTIMENT_LABELS: Tuple[str, ...] = ("negative", "neg")

# LIMITS
PREDICTION_CACHE_MAX_SIZE: int = 100
BATCH_YIELD_INTERVAL: int = 10
TOP_FEATURES_COUNT: int = 10
MIN_FEATURE_TOKEN_LENGTH: int = 3
MAX_TEXT_LENGTH: int = 5000
MAX_BATCH_SIZE: int = 1000

# TIMEOUTS (seconds)
CLASSIFIER_TIMEOUT: float = 30.0

# RISK SCORING
THREAT_LABEL_THRESHOLD: float = 0.5

# Lower bound of each level, checked from highest to lowest
RISK_LEVEL_THRESHOLDS: List[Tuple[str, float]] = [
    ("high", 0.7),
    ("medium", 0.4),
    ("low", 0.0),
]

MAX_RULE_CONFIDENCE: float = 0.95
RULE_CONFIDENCE_STEP: float = 0.1

# Score boosts applied on top of the classifier probability
HIGH_RISK_BOOST_PER_HIT: float = 0.2
HIGH_RISK_BOOST_CAP: float = 0.4
TOOL_BOOST_PER_HIT: float = 0.15
TOOL_BOOST_CAP: float = 0.3
COMMERCIAL_BOOST: float = 0.25
URGENCY_BOOST: float = 0.15
ATTACK_PATTERN_BOOST: float = 0.3

# FALLBACK SCORING
FALLBACK_BASE_RISK: float = 0.1
FALLBACK_THREAT_KEYWORD_BOOST: float = 0.2
FALLBACK_COMMERCIAL_BOOST: float = 0.25
FALLBACK_URGENCY_BOOST: float = 0.15
FALLBACK_BASE_CONFIDENCE: float = 0.3
FALLBACK_CONFIDENCE_PER_KEYWORD: float = 0.2
FALLBACK_MAX_CONFIDENCE: float = 0.8

# SAFE DEFAULT (batch item failure)
SAFE_DEFAULT_RISK: float = 0.1
SAFE_DEFAULT_CONFIDENCE: float = 0.1
SAFE_DEFAULT_EXPLANATION: str = "Error in prediction - defaulting to benign"

# KEYWORD VOCABULARIES

# Emitted as THREAT_<WORD> features when present in normalized text
FEATURE_THREAT_KEYWORDS: List[str] = [
    'ddos', 'attack', 'hack', 'breach', 'exploit', 'malware', 'virus',
    'ransomware', 'phishing', 'credentials', 'password', 'leak',
    'selling', 'buying', 'urgent', 'cheap', 'free', 'download',
    'builder', 'kit', 'tool', 'botnet', 'payload',
]

HIGH_RISK_KEYWORDS: List[str] = [
    'ddos', 'attack', 'hack', 'ransomware', 'selling', 'buying', 'exploit',
]

MEDIUM_RISK_KEYWORDS: List[str] = [
    'urgent', 'cheap', 'free', 'test', 'new', 'kit',
]

TOOL_KEYWORDS: List[str] = [
    'builder', 'tool', 'bot', 'payload', 'framework',
]

URGENCY_PATTERN: str = r'urgent|asap|immediate|now|today|tonight|tomorrow'
COMMERCIAL_PATTERN: str = r'sell|buy|price|cheap|free|cost|payment|money'

# Attack patterns checked against raw text: (name, regex, explanation)
ATTACK_PATTERNS: List[Tuple[str, str, str]] = [
    ("ddos", r'ddos|dos\s+attack|denial.of.service', "DDoS attack pattern detected"),
    ("phishing", r'phishing|phish|credential.harvest|fake.login', "Phishing pattern detected"),
    ("ransomware", r'ransom|encrypt|crypto.lock|file.lock', "Ransomware pattern detected"),
]

FALLBACK_THREAT_KEYWORDS: List[str] = [
    'ddos', 'attack', 'hack', 'ransomware', 'phishing', 'exploit',
    'malware', 'botnet', 'breach', 'leak', 'credentials', 'payload',
]

FALLBACK_COMMERCIAL_KEYWORDS: List[str] = [
    'selling', 'buying', 'cheap', 'free', 'price',
]

FALLBACK_URGENCY_KEYWORDS: List[str] = [
    'urgent', 'now', 'today', 'asap', 'immediate',
]

# ENTITY PATTERNS
URL_PATTERN: str = r'(?:https?://)?(?:www\.)?([a-zA-Z0-9-]+\.[a-zA-Z]{2,}(?:\.[a-zA-Z]{2,})?)'
IPV4_PATTERN: str = r'\b(?:[0-9]{1,3}\.){3}[0-9]{1,3}\b'
DATE_TIME_PATTERN: str = (
    r'\b(?:monday|tuesday|wednesday|thursday|friday|saturday|sunday'
    r'|today|tomorrow|yesterday'
    r'|\d{1,2}/\d{1,2}/\d{2,4}'
    r'|\d{1,2}-\d{1,2}-\d{2,4}'
    r'|\d{1,2}:\d{2}(?:\s*(?:am|pm|utc|gmt))?)\b'
)

TOOL_PATTERNS: List[str] = [
    r'ransomware\s+(?:builder|kit|tool)',
    r'phishing\s+(?:kit|tool|framework)',
    r'(?:ddos|dos)\s+(?:tool|bot|botnet)',
    r'(?:exploit|vulnerability)\s+(?:kit|scanner)',
    r'keylogger',
    r'botnet',
    r'crypto\s+locker',
    r'email\s+(?:templates|harvester)',
    r'credential\s+(?:harvester|stealer)',
    r'network\s+scanner',
    r'social\s+engineering\s+toolkit',
]

# SYNTHETIC DATASET
SYNTHETIC_DATASET_SIZE: int = 300
SYNTHETIC_THREAT_RATIO: float = 0.4
SYNTHETIC_TIMESTAMP_SPREAD_DAYS: int = 30

DATASET_CSV_FIELDS: List[str] = ['id', 'text', 'label', 'type', 'timestamp']
BATCH_CSV_TEXT_COLUMNS: Tuple[str, ...] = ('text', 'message')

# HTTP
DEFAULT_CORS_ORIGINS: List[str] = [
    "http://localhost:3000",
    "http://localhost:5173",
    "http://127.0.0.1:3000",
    "http://127.0.0.1:5173",
]

# Explanation templates keyed by rule name
RULE_DESCRIPTIONS: Dict[str, str] = {
    "high_risk": "High-risk keywords detected",
    "tools": "Cybersecurity tools mentioned",
    "commercial": "Commercial language detected",
    "urgency": "Urgency indicators found",
}
