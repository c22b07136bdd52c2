"""
Rule-based skill extraction from job description text.

Every regex hit is lowercased, folded onto a canonical name through
SKILL_SYNONYMS and categorized. The first hit of a skill weighs 1.0, each
repeat adds 0.5.
"""
import logging
import re
from typing import Dict, List

from hiready.schemas.interview_plan import ExtractedSkill

logger = logging.getLogger(__name__)

SKILL_SYNONYMS: Dict[str, List[str]] = {
    "javascript": ["js", "ecmascript", "es6", "es2015", "vanilla js"],
    "typescript": ["ts"],
    "nodejs": ["node", "node.js", "express", "express.js", "nestjs"],
    "react": ["reactjs", "react.js", "react native", "jsx"],
    "python": ["py", "python3", "django", "flask", "fastapi"],
    "api": ["rest", "restful", "graphql", "api design", "api integration", "web services"],
    "database": ["sql", "postgresql", "postgres", "mysql", "mongodb", "nosql", "orm", "drizzle", "prisma"],
    "testing": ["unit testing", "jest", "pytest", "testing frameworks", "tdd", "bdd", "cypress"],
    "devops": ["ci/cd", "docker", "kubernetes", "k8s", "aws", "gcp", "azure", "cloud"],
    "git": ["version control", "github", "gitlab", "bitbucket"],
    "agile": ["scrum", "kanban", "sprint", "jira"],
}

# Checked in this order; first list with a substring hit decides the category
SKILL_CATEGORIES = [
    ("language", ["javascript", "typescript", "python", "java", "go", "rust", "c++", "c#", "ruby", "php", "swift", "kotlin"]),
    ("framework", ["react", "angular", "vue", "nodejs", "express", "django", "flask", "spring", "rails", "nextjs", "nestjs"]),
    ("tool", [
        "git", "docker", "kubernetes", "jenkins", "terraform", "webpack", "vite", "npm", "yarn",
        "salesforce", "hubspot", "tableau", "power bi", "figma", "jira",
    ]),
    ("concept", [
        "api", "testing", "devops", "microservices", "architecture", "algorithms", "data structures",
        "design patterns", "agile", "scrum", "kanban",
    ]),
    ("domain", [
        "frontend", "backend", "fullstack", "mobile", "cloud", "ml", "ai", "data science", "security",
        "sales", "marketing", "finance", "operations", "hr", "consulting", "product", "design",
        "data analysis", "business intelligence", "machine learning", "deep learning",
    ]),
    ("soft_skill", [
        "leadership", "communication", "negotiation", "presentation", "collaboration",
        "stakeholder management", "relationship", "strategic thinking", "problem solving",
        "coaching", "mentoring", "influence", "decision making", "storytelling",
    ]),
]

_SKILL_PATTERN_SOURCES = [
    # Programming languages
    r"\b(JavaScript|TypeScript|Python|Java|Go|Rust|C\+\+|C#|Ruby|PHP|Swift|Kotlin)\b",
    # Frameworks
    r"\b(React|Angular|Vue|Node\.?js|Express|Django|Flask|Spring|Rails|Next\.?js|Nest\.?js)\b",
    # Infrastructure and tools
    r"\b(REST|GraphQL|API|SQL|PostgreSQL|MongoDB|Redis|Docker|Kubernetes|AWS|GCP|Azure)\b",
    r"\b(Git|CI/CD|Jenkins|Terraform|Webpack|Vite|Jest|Pytest|Cypress)\b",
    r"\b(microservices?|serverless|cloud native|distributed systems?)\b",
    r"\b(unit testing|integration testing|e2e testing|TDD|BDD)\b",
    r"\b(Agile|Scrum|Kanban|DevOps|SRE)\b",
    # Data and analytics
    r"\b(data analysis|data analytics|business intelligence|BI|Tableau|Power BI|Looker)\b",
    r"\b(machine learning|ML|deep learning|AI|artificial intelligence|NLP|computer vision)\b",
    r"\b(ETL|data pipeline|data warehouse|Snowflake|Databricks|Spark|Hadoop)\b",
    r"\b(statistical analysis|A/B testing|experimentation|predictive modeling)\b",
    # Sales and business development
    r"\b(sales|business development|revenue growth|pipeline management|quota)\b",
    r"\b(account management|key accounts|strategic accounts|enterprise sales|B2B sales)\b",
    r"\b(client relationship|customer relationship|relationship building|client success)\b",
    r"\b(negotiation|deal closing|contract negotiation|pricing strategy)\b",
    r"\b(CRM|Salesforce|HubSpot|sales enablement|sales operations)\b",
    r"\b(prospecting|lead generation|cold calling|outbound sales)\b",
    # Strategy and consulting
    r"\b(strategic planning|business strategy|corporate strategy|go-to-market|GTM)\b",
    r"\b(market analysis|competitive analysis|market research|industry analysis)\b",
    r"\b(consulting|advisory|problem solving|analytical thinking)\b",
    r"\b(business case|ROI analysis|financial modeling|P&L|profit and loss)\b",
    # Leadership and management
    r"\b(leadership|team leadership|people management|team management)\b",
    r"\b(stakeholder management|executive engagement|C-suite|senior leadership)\b",
    r"\b(cross-functional|collaboration|influence|change management)\b",
    r"\b(coaching|mentoring|talent development|performance management)\b",
    r"\b(decision making|strategic thinking|critical thinking)\b",
    # Communication
    r"\b(communication skills?|presentation skills?|public speaking)\b",
    r"\b(written communication|verbal communication|storytelling)\b",
    r"\b(executive presentation|board presentation|client presentation)\b",
    # Product and design
    r"\b(product management|product strategy|product roadmap|product lifecycle)\b",
    r"\b(user research|user experience|UX|UI|design thinking)\b",
    r"\b(requirements gathering|PRD|product requirements|specifications)\b",
    r"\b(prototyping|wireframing|Figma|Sketch|user testing)\b",
    # Operations
    r"\b(operations management|process improvement|operational excellence)\b",
    r"\b(supply chain|logistics|inventory management|procurement)\b",
    r"\b(project management|program management|PMP|portfolio management)\b",
    r"\b(Six Sigma|Lean|Kaizen|process optimization|efficiency)\b",
    # Finance
    r"\b(financial analysis|budgeting|forecasting|variance analysis)\b",
    r"\b(FP&A|financial planning|cost analysis|margin analysis)\b",
    r"\b(valuation|due diligence|M&A|mergers and acquisitions)\b",
    # Marketing
    r"\b(marketing strategy|digital marketing|content marketing|brand management)\b",
    r"\b(SEO|SEM|paid media|social media marketing|growth marketing)\b",
    r"\b(demand generation|lead nurturing|marketing automation|campaign management)\b",
    # HR and recruiting
    r"\b(talent acquisition|recruiting|hiring|interviewing)\b",
    r"\b(compensation|benefits|total rewards|HRIS)\b",
    r"\b(employee engagement|culture|organizational development|learning & development)\b",
]

SKILL_PATTERNS = [re.compile(source, re.IGNORECASE) for source in _SKILL_PATTERN_SOURCES]


def normalize_skill_name(skill: str) -> str:
    lower = skill.lower().strip()
    for canonical, synonyms in SKILL_SYNONYMS.items():
        if lower == canonical or lower in synonyms:
            return canonical
    return lower


def categorize_skill(skill: str) -> str:
    lower = skill.lower()
    for category, keywords in SKILL_CATEGORIES:
        if any(keyword in lower for keyword in keywords):
            return category
    return "soft_skill"


def extract_skills(text: str) -> List[ExtractedSkill]:
    """
    Extract skills from free text, strongest first.

    Ordering: weight descending, then first appearance in the pattern scan.
    """
    if not text:
        return []

    skills: Dict[str, ExtractedSkill] = {}
    for pattern in SKILL_PATTERNS:
        for match in pattern.finditer(text):
            name = normalize_skill_name(match.group(0))
            existing = skills.get(name)
            if existing is None:
                skills[name] = ExtractedSkill(name=name, category=categorize_skill(name), weight=1.0)
            else:
                existing.weight += 0.5

    ranked = sorted(skills.values(), key=lambda skill: -skill.weight)
    logger.debug(f"Skills extracted: count={len(ranked)}, top={[skill.name for skill in ranked[:5]]}")
    return ranked
