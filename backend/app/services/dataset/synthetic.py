"""
ThreatLens Synthetic Dataset

Generates labelled synthetic cybersecurity chatter for demos and
evaluation. All messages are fabricated; none come from real forums.
"""

import logging
import random
from datetime import datetime, timedelta, timezone
from typing import Callable, Dict, List, Optional

from app.models.dataset import ThreatMessage, ThreatType
from app.models.prediction import ThreatLabel
from app.utils.constants import (
    SYNTHETIC_DATASET_SIZE,
    SYNTHETIC_THREAT_RATIO,
    SYNTHETIC_TIMESTAMP_SPREAD_DAYS,
)
from app.utils.exceptions import DatasetError

logger = logging.getLogger(__name__)


THREAT_TEMPLATES: Dict[ThreatType, List[str]] = {
    ThreatType.RANSOMWARE: [
        "Testing new ransomware builder, needs tester",
        "Have you tried the new crypto locker? Very effective",
        "Looking for partners to deploy file encryption malware",
        "New ransomware variant bypasses most AV solutions",
        "Selling ransomware-as-a-service platform, 70/30 split",
        "Anyone know good payment methods for ransom demands?",
        "Latest version of file locker is ready for distribution",
        "Ransomware kit with automatic payment portal included",
        "Testing encryption speeds on different file types",
        "Who wants to beta test my new file encryption tool?",
        "Double extortion ransomware with data leak threats",
        "Automated ransomware deployment targeting healthcare",
        "New locker variant targets backup systems first",
        "Multi-stage encryption to defeat recovery tools",
        "Custom ransom note generator with localization",
    ],
    ThreatType.PHISHING: [
        "Selling a new phishing kit that spoofs bank login pages",
        "Updated email templates that bypass spam filters perfectly",
        "New phishing framework with real-time credential harvesting",
        "Anyone interested in premium phishing hosting services?",
        "Fresh batch of convincing bank phishing pages available",
        "Selling email lists + matching phishing templates",
        "New SMS phishing campaign targeting mobile banking",
        "Spear phishing toolkit for corporate email accounts",
        "Advanced phishing kit with 2FA bypass capabilities",
        "Business email compromise templates for wire transfers",
        "QR code phishing attack redirects to credential theft",
        "Phishing kit with built-in keylogger functionality",
        "Fake delivery notification phishing with tracking links",
    ],
    ThreatType.DDOS: [
        "Plan DDoS on examplebank.com this Friday at 3 AM UTC",
        "Looking to rent botnet for stress testing competitor sites",
        "New amplification method increases DDoS power by 500%",
        "Anyone want to join coordinated attack on government portal?",
        "Selling access to 50k compromised IoT devices for DDoS",
        "New reflection attack method works great against CDNs",
        "Coordinating multi-vector DDoS attack next week",
        "Selling DDoS-for-hire service, competitive pricing",
        "DNS amplification attack with 100x multiplication factor",
        "SYN flood attack exhausting server resources",
        "IoT botnet with 200k infected devices ready",
        "DDoS with ransom demand threatening escalation",
    ],
    ThreatType.CREDENTIAL_THEFT: [
        "Who wants to buy credentials for mail.example.org? cheap",
        "Fresh database dump with 100k user passwords available",
        "Selling corporate VPN access credentials, active accounts",
        "New keylogger bypasses modern endpoint protection",
        "Harvested admin credentials from recent breach, interested?",
        "Banking credentials from recent phishing campaign for sale",
        "Corporate email credentials with 2FA tokens included",
        "Credential stuffing attack using breach compilations",
        "Brute force tool with proxy rotation capabilities",
        "Cookie theft malware extracting browser sessions",
        "Token theft from cloud service accounts",
        "Service account credentials for lateral movement",
    ],
    ThreatType.OTHER: [
        "New exploit for popular CMS system, zero-day confirmed",
        "Selling access to compromised web servers, root level",
        "New social engineering toolkit with voice cloning",
        "Selling access to compromised payment processing systems",
        "New technique for SIM swapping works 90% of the time",
        "Remote code execution exploit for network appliances",
        "Privilege escalation exploit for Linux kernels",
        "Malware-as-a-service platform with crypto miners",
        "Data exfiltration tool using DNS tunneling",
        "Command and control infrastructure for sale",
        "Zero-click exploit for mobile messaging apps",
        "Firmware backdoor for network equipment",
    ],
}

BENIGN_TEMPLATES: List[str] = [
    "Reminder: team meeting tomorrow, bring slides",
    "Nice writeup on SSL config — helpful for devs",
    "Great conference talk on network security best practices",
    "Anyone recommend good cybersecurity training courses?",
    "Thanks for sharing that vulnerability disclosure process",
    "Interesting article about zero-trust architecture implementation",
    "Team lunch next Friday at the usual spot",
    "New security policy update requires multi-factor authentication",
    "Scheduled maintenance window this weekend for security updates",
    "Code review meeting moved to Wednesday 2 PM",
    "Security awareness training is mandatory for all employees",
    "New firewall rules will be implemented next week",
    "Thanks for the help with the penetration testing report",
    "Reminder to update your passwords before the deadline",
    "Security audit completed successfully, no major issues found",
    "New VPN certificates will be distributed tomorrow",
    "Backup systems tested successfully over the weekend",
    "Thanks for reporting that suspicious email quickly",
    "Patch Tuesday updates scheduled for tonight",
    "Congratulations on passing the security certification exam",
    "Disaster recovery test successful, great job team",
    "Access control review completed for all departments",
    "Security budget planning meeting next Tuesday",
    "Privileged access management system deployed",
]

_SAMPLE_TIMESTAMP = datetime(2025, 10, 30, tzinfo=timezone.utc)

SAMPLE_MESSAGES: List[ThreatMessage] = [
    ThreatMessage(id="1", text="Plan DDoS on examplebank.com this Friday at 3 AM UTC",
                  label=ThreatLabel.THREAT, type=ThreatType.DDOS, timestamp=_SAMPLE_TIMESTAMP),
    ThreatMessage(id="2", text="Selling a new phishing kit that spoofs bank login pages",
                  label=ThreatLabel.THREAT, type=ThreatType.PHISHING, timestamp=_SAMPLE_TIMESTAMP),
    ThreatMessage(id="3", text="Who wants to buy credentials for mail.example.org? cheap",
                  label=ThreatLabel.THREAT, type=ThreatType.CREDENTIAL_THEFT, timestamp=_SAMPLE_TIMESTAMP),
    ThreatMessage(id="4", text="Reminder: team meeting tomorrow, bring slides",
                  label=ThreatLabel.BENIGN, type=ThreatType.NONE, timestamp=_SAMPLE_TIMESTAMP),
    ThreatMessage(id="5", text="Trying new ransomware builder, needs tester",
                  label=ThreatLabel.THREAT, type=ThreatType.RANSOMWARE, timestamp=_SAMPLE_TIMESTAMP),
    ThreatMessage(id="6", text="Nice writeup on SSL config — helpful for devs",
                  label=ThreatLabel.BENIGN, type=ThreatType.NONE, timestamp=_SAMPLE_TIMESTAMP),
]


def _variations(rng: random.Random) -> List[Callable[[str], str]]:
    """Message variations, each applied independently with its own probability."""
    return [
        lambda t: f"URGENT: {t}" if rng.random() < 0.3 else t,
        lambda t: f"{t} - time sensitive" if rng.random() < 0.3 else t,
        lambda t: t.replace('.', '...') if rng.random() < 0.2 else t,
        lambda t: f"{t} anyone?" if rng.random() < 0.2 else t,
        lambda t: f"{t} DM for details" if rng.random() < 0.1 else t,
        lambda t: f"{t} - contact me privately" if rng.random() < 0.1 else t,
    ]


def add_variation(text: str, rng: Optional[random.Random] = None) -> str:
    """
    Add realistic noise to a template message.

    Args:
        text: Template text
        rng: Random source (unseeded if None)

    Returns:
        Varied text
    """
    rng = rng or random.Random()
    for variation in _variations(rng):
        text = variation(text)
    return text


def _random_timestamp(rng: random.Random, now: datetime) -> datetime:
    offset = rng.random() * SYNTHETIC_TIMESTAMP_SPREAD_DAYS
    return now - timedelta(days=offset)


def generate_synthetic_dataset(
    count: int = SYNTHETIC_DATASET_SIZE,
    threat_ratio: float = SYNTHETIC_THREAT_RATIO,
    seed: Optional[int] = None,
) -> List[ThreatMessage]:
    """
    Generate a shuffled synthetic dataset.

    Threat messages are split evenly across threat types with the
    remainder going to the last type.

    Args:
        count: Total number of messages
        threat_ratio: Fraction of threat messages (0-1)
        seed: Seed for reproducible output

    Returns:
        List of ThreatMessage objects

    Raises:
        DatasetError: If count is negative or threat_ratio is outside 0-1
    """
    if count < 0:
        raise DatasetError(f"count must be non-negative, got {count}")
    if not 0.0 <= threat_ratio <= 1.0:
        raise DatasetError(f"threat_ratio must be between 0 and 1, got {threat_ratio}")

    rng = random.Random(seed)
    now = datetime.now(timezone.utc)

    threat_count = int(count * threat_ratio)
    benign_count = count - threat_count

    threat_types = list(THREAT_TEMPLATES.keys())
    per_type = threat_count // len(threat_types)

    dataset: List[ThreatMessage] = []

    for type_index, threat_type in enumerate(threat_types):
        templates = THREAT_TEMPLATES[threat_type]
        if type_index == len(threat_types) - 1:
            type_count = threat_count - per_type * (len(threat_types) - 1)
        else:
            type_count = per_type

        for i in range(type_count):
            dataset.append(ThreatMessage(
                id=f"threat_{threat_type.value}_{i + 1}",
                text=add_variation(templates[i % len(templates)], rng),
                label=ThreatLabel.THREAT,
                type=threat_type,
                timestamp=_random_timestamp(rng, now),
            ))

    for i in range(benign_count):
        dataset.append(ThreatMessage(
            id=f"benign_{i + 1}",
            text=add_variation(BENIGN_TEMPLATES[i % len(BENIGN_TEMPLATES)], rng),
            label=ThreatLabel.BENIGN,
            type=ThreatType.NONE,
            timestamp=_random_timestamp(rng, now),
        ))

    rng.shuffle(dataset)

    logger.info(f"Generated synthetic dataset: {threat_count} threat, {benign_count} benign")
    return dataset
