from sqlalchemy.orm import declarative_base

Base = declarative_base()

# Models register themselves by importing Base from this module;
# hiready.db.models imports every model so metadata is complete.
