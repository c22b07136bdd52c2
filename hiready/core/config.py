import os

# ✅ Database
DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./hiready.db")
RUN_MIGRATIONS = os.getenv("RUN_MIGRATIONS", "0") == "1"

# ✅ Security
SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-change-me")
ALGORITHM = os.getenv("ALGORITHM", "HS256")
ACCESS_TOKEN_EXPIRE_MINUTES = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", "60"))

# ✅ OpenAI (answer classification + session scoring)
OPENAI_API_KEY = os.getenv("OPENAI_API_KEY")
LLM_JUDGE_MODEL = os.getenv("LLM_JUDGE_MODEL", "gpt-4o-mini")

# ✅ Logging
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

# ✅ Interview engine
MAX_PROBES_PER_PATTERN = int(os.getenv("MAX_PROBES_PER_PATTERN", "3"))
EMPLOYER_INTERVIEW_MINUTES = int(os.getenv("EMPLOYER_INTERVIEW_MINUTES", "12"))
