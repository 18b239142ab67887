"""Static keyword and pattern tables for regulatory content."""

from types import MappingProxyType

from ..models.classification_result import DocumentType

DOCUMENT_KEYWORDS = MappingProxyType({
    DocumentType.GUIDANCE: (
        "guidance", "guide", "how to", "guidelines", "best practice", "procedures",
    ),
    DocumentType.REGULATION: (
        "regulation", "regulatory", "requirement", "legislation", "statute", "act",
        "rule", "law", "directive", "mandate",
    ),
    DocumentType.CONSULTATION: (
        "consultation", "feedback", "proposal", "draft", "comment", "response",
        "seeking views",
    ),
    DocumentType.ENFORCEMENT_ACTION: (
        "enforcement", "penalty", "fine", "sanction", "breach", "compliance",
        "violation", "action taken",
    ),
    DocumentType.PRESS_RELEASE: (
        "press release", "announcement", "news", "published", "statement",
    ),
    DocumentType.STATISTICS: (
        "statistics", "data", "figures", "report", "quarterly", "annual", "numbers",
    ),
    DocumentType.LICENSING_INFO: (
        "license", "licensing", "permit", "application", "approval", "authorized",
        "certificate",
    ),
})

DOCUMENT_PATTERNS = MappingProxyType({
    DocumentType.GUIDANCE: (
        r"\bguidance\s+(?:on|for|about)\b",
        r"\bguide\s+to\b",
        r"\bhow\s+to\b",
    ),
    DocumentType.ENFORCEMENT_ACTION: (
        r"\b(?:fined|penalized|sanctioned)\b",
        r"\bpenalty\s+of\s+[£$]?[\d,.]+\b",
        r"\benforcement\s+action\b",
    ),
    DocumentType.CONSULTATION: (
        r"\bconsultation\s+(?:on|about)\b",
        r"\b(?:seeking|request|invite)\s+(?:views|feedback|comments)\b",
        r"\b(?:response|replies)\s+to\s+consultation\b",
    ),
})

# Path patterns matched against the lower-cased URL, +2.0 each
URL_TYPE_PATTERNS = (
    (r"/regulation|/legislation|/laws", DocumentType.REGULATION),
    (r"/guide|/guidance|/help", DocumentType.GUIDANCE),
    (r"/consult|/consultation|/feedback", DocumentType.CONSULTATION),
    (r"/enforcement|/action|/penalty|/fine", DocumentType.ENFORCEMENT_ACTION),
    (r"/press|/news|/media|/announcement", DocumentType.PRESS_RELEASE),
    (r"/stat|/data|/figures|/report", DocumentType.STATISTICS),
    (r"/licens|/permit|/application|/apply", DocumentType.LICENSING_INFO),
)

REGULATORY_CHANGE_PATTERNS = MappingProxyType({
    "RequirementChange": r"must|required|mandatory|shall|condition|obligation",
    "DateChange": r"effective|from|by|deadline|due date",
    "FeeChange": r"fee|payment|cost|charge|price|amount|rate|percentage",
    "PenaltyChange": r"penalty|fine|sanction|enforcement|action",
    "ProcessChange": r"process|procedure|steps|method|application|submission",
})

IMPORTANT_KEYWORDS = (
    "new requirement", "updated requirement", "policy change", "regulation change",
    "amendment", "update to", "revision of", "compliance deadline", "effective date",
    "license condition", "code of practice",
)

PRIORITY_SECTIONS = (
    "/licensees-and-businesses/lccp",
    "/licensees-and-businesses/compliance",
    "/licensees-and-businesses/aml",
    "/licensees-and-businesses/enforcement",
    "/news/enforcement-action",
)

PRIORITY_CONTENT_TYPES = (
    "guidance",
    "consultation-response",
    "regulatory-update",
    "strategy",
    "report",
)

LOW_PRIORITY_PATTERNS = (
    "/careers",
    "/contact-us/feedback",
    "/cookies",
    "/accessibility",
    "/terms-of-use",
)

GAMBLING_KEYWORDS = MappingProxyType({
    "AML": (
        "anti-money laundering", "money laundering", "terrorist financing",
        "suspicious activity", "customer due diligence", "KYC", "know your customer",
    ),
    "Licensing": (
        "license", "licence", "licensing", "operating license",
        "personal management license", "application", "renewal",
    ),
    "Responsible Gambling": (
        "responsible gambling", "safer gambling", "self-exclusion", "gambling limits",
        "player protection", "gambling harm", "vulnerable persons",
    ),
    "LCCP": (
        "license conditions", "code of practice", "LCCP", "social responsibility",
        "regulatory returns", "reporting requirements",
    ),
    "Enforcement": (
        "regulatory settlement", "enforcement action", "fine", "penalty",
        "license suspension", "license revocation", "investigation",
    ),
})

# Which document type each gambling keyword family is registered under
GAMBLING_FAMILY_TYPES = MappingProxyType({
    "AML": DocumentType.REGULATION,
    "Licensing": DocumentType.LICENSING_INFO,
    "Responsible Gambling": DocumentType.GUIDANCE,
    "LCCP": DocumentType.REGULATION,
    "Enforcement": DocumentType.ENFORCEMENT_ACTION,
})
