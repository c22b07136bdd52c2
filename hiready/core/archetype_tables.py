"""
Archetype reference tables.

Single source of truth for the keyword patterns used to classify a company
name / job description into a company archetype and a role title into a
role archetype. Tables are immutable and bundled in ``ArchetypeTables`` so
resolvers can be handed a substitute set in tests.
"""
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping, Optional, Tuple

# Allowed values for Company.archetype
COMPANY_ARCHETYPES: Tuple[str, ...] = (
    "startup",
    "enterprise",
    "regulated",
    "consumer",
    "saas",
    "fintech",
    "edtech",
    "services",
    "industrial",
    "it_services",
    "big_tech",
    "bfsi",
    "fmcg",
    "manufacturing",
    "consulting",
    "bpm",
    "telecom",
    "conglomerate",
)

CONFIDENCE_LEVELS: Tuple[str, ...] = ("high", "medium", "low")

ROLE_FAMILIES: Tuple[str, ...] = ("tech", "data", "product", "sales", "business")

# Tokens dropped from company names before comparison ("Infosys Ltd" == "infosys")
CORPORATE_SUFFIXES: Tuple[str, ...] = (
    "private",
    "pvt",
    "ltd",
    "limited",
    "inc",
    "llc",
    "corp",
    "corporation",
    "india",
    "technologies",
    "solutions",
    "consulting",
    "services",
)


@dataclass(frozen=True)
class CompanyPatternSet:
    """Keywords that point at one company archetype when found in a JD."""
    archetype: str
    keywords: Tuple[str, ...]
    confidence: str = "medium"


# Evaluated in this order; first archetype with >= 2 distinct hits wins.
COMPANY_JD_PATTERNS: Tuple[CompanyPatternSet, ...] = (
    CompanyPatternSet("big_tech", (
        "faang", "maang", "google", "amazon", "microsoft", "meta", "apple",
        "netflix", "system design", "scale", "distributed systems",
    )),
    CompanyPatternSet("consulting", (
        "consulting", "mbb", "mckinsey", "bcg", "bain", "deloitte", "pwc",
        "ey", "kpmg", "case study", "client engagement",
    )),
    CompanyPatternSet("bfsi", (
        "banking", "financial services", "investment", "trading",
        "risk management", "compliance", "regulatory", "fintech",
    )),
    CompanyPatternSet("it_services", (
        "it services", "outsourcing", "service delivery", "client project",
        "onsite", "offshore", "tcs", "infosys", "wipro", "cognizant",
    )),
    CompanyPatternSet("fmcg", (
        "fmcg", "consumer goods", "brand management", "trade marketing",
        "distribution", "supply chain", "retail",
    )),
    CompanyPatternSet("saas", (
        "saas", "subscription", "b2b software", "enterprise software",
        "cloud platform", "api",
    )),
    CompanyPatternSet("fintech", (
        "fintech", "payments", "lending", "digital banking", "neobank",
        "crypto", "blockchain",
    )),
    CompanyPatternSet("edtech", (
        "edtech", "education", "learning", "e-learning", "online courses",
        "upskilling",
    )),
    CompanyPatternSet("consumer", (
        "consumer tech", "app", "mobile", "consumer internet", "marketplace",
        "delivery", "food tech",
    )),
    CompanyPatternSet("startup", (
        "startup", "series a", "series b", "venture", "fast-paced",
        "hypergrowth", "founder",
    ), confidence="low"),
    CompanyPatternSet("enterprise", (
        "enterprise", "fortune 500", "mnc", "legacy", "transformation",
    ), confidence="low"),
)

# Definition order matters: equal match counts resolve to the earlier entry.
ROLE_KEYWORDS: Mapping[str, Tuple[str, ...]] = MappingProxyType({
    "core_software_engineer": (
        "software engineer", "software developer", "sde", "backend",
        "frontend", "fullstack", "full stack", "full-stack",
        "mobile developer", "ios developer", "android developer",
        "web developer",
    ),
    "data_analyst": (
        "data analyst", "business analyst", "analytics", "bi analyst",
        "business intelligence",
    ),
    "data_engineer": (
        "data engineer", "etl developer", "data platform",
        "data infrastructure", "big data engineer",
    ),
    "data_scientist": (
        "data scientist", "data science", "applied scientist",
        "research scientist",
    ),
    "ml_engineer": (
        "ml engineer", "machine learning engineer", "mlops", "ai engineer",
        "deep learning",
    ),
    "infra_platform": (
        "devops", "sre", "site reliability", "platform engineer",
        "infrastructure", "cloud engineer", "kubernetes", "devsecops",
    ),
    "security_engineer": (
        "security engineer", "security analyst", "cybersecurity", "infosec",
        "penetration tester", "appsec",
    ),
    "qa_test_engineer": (
        "qa engineer", "quality assurance", "test engineer", "sdet",
        "automation engineer", "quality engineer",
    ),
    "product_manager": (
        "product manager", "pm", "product owner", "apm",
        "associate product manager", "group product manager",
    ),
    "technical_program_manager": (
        "technical program manager", "tpm", "program manager",
        "engineering program manager",
    ),
    "product_designer": (
        "product designer", "ux designer", "ui designer", "ux/ui",
        "interaction designer", "visual designer",
    ),
    "marketing_growth": (
        "marketing", "growth", "digital marketing", "performance marketing",
        "brand marketing", "content marketing",
    ),
    "sales_account": (
        "sales", "account executive", "account manager",
        "business development", "sales executive", "enterprise sales",
    ),
    "customer_success": (
        "customer success", "csm", "customer success manager",
        "client success", "customer experience",
    ),
    "bizops_strategy": (
        "bizops", "business operations", "strategy", "chief of staff",
        "strategy analyst", "corporate strategy",
    ),
    "operations_general": (
        "operations", "ops manager", "operations manager", "supply chain",
        "logistics", "process improvement",
    ),
    "finance_strategy": (
        "finance", "fp&a", "financial analyst", "investment banking",
        "corporate finance", "treasury",
    ),
    "consulting_general": (
        "consultant", "management consultant", "strategy consultant",
        "associate consultant", "senior consultant",
    ),
})

ROLE_FAMILY_MEMBERS: Mapping[str, Tuple[str, ...]] = MappingProxyType({
    "tech": ("core_software_engineer", "infra_platform", "security_engineer", "qa_test_engineer"),
    "data": ("data_analyst", "data_engineer", "data_scientist", "ml_engineer"),
    "product": ("product_manager", "technical_program_manager", "product_designer"),
    "sales": ("sales_account", "customer_success"),
    "business": (
        "marketing_growth", "bizops_strategy", "operations_general",
        "finance_strategy", "consulting_general",
    ),
})


def _invert_families(members: Mapping[str, Tuple[str, ...]]) -> Mapping[str, str]:
    return MappingProxyType({
        archetype_id: family
        for family, archetype_ids in members.items()
        for archetype_id in archetype_ids
    })


ROLE_FAMILY_BY_ARCHETYPE: Mapping[str, str] = _invert_families(ROLE_FAMILY_MEMBERS)


@dataclass(frozen=True)
class ArchetypeTables:
    """Injectable bundle of every table the company/role resolvers read."""
    corporate_suffixes: Tuple[str, ...] = CORPORATE_SUFFIXES
    company_jd_patterns: Tuple[CompanyPatternSet, ...] = COMPANY_JD_PATTERNS
    role_keywords: Mapping[str, Tuple[str, ...]] = field(default_factory=lambda: ROLE_KEYWORDS)
    role_family_by_archetype: Mapping[str, str] = field(default_factory=lambda: ROLE_FAMILY_BY_ARCHETYPE)

    def role_family_for(self, role_archetype_id: Optional[str]) -> Optional[str]:
        if not role_archetype_id:
            return None
        return self.role_family_by_archetype.get(role_archetype_id)


DEFAULT_ARCHETYPE_TABLES = ArchetypeTables()


def is_valid_company_archetype(archetype: Optional[str]) -> bool:
    """None is allowed (unclassified company); anything else must be in the enum."""
    return archetype is None or archetype in COMPANY_ARCHETYPES
