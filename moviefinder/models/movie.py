from sqlalchemy import Column, Integer, Text
from sqlalchemy.orm import relationship
from . import Base

class Movie(Base):
    __tablename__ = 'movies'

    id = Column(Integer, primary_key=True, autoincrement=True)
    # Dedup key; not unique because concurrent saves may race
    title = Column(Text, nullable=False, index=True)
    year = Column(Text, nullable=False)
    rated = Column(Text, nullable=False)
    released = Column(Text, nullable=False)
    runtime = Column(Text, nullable=False)
    genre = Column(Text, nullable=False)
    director = Column(Text, nullable=False)
    writer = Column(Text, nullable=False)
    # Comma-joined names as returned by OMDb
    actors = Column(Text, nullable=False)
    plot = Column(Text, nullable=False)
    language = Column(Text, nullable=False, default="")
    country = Column(Text, nullable=False, default="")
    awards = Column(Text, nullable=False, default="")
    poster = Column(Text, nullable=False, default="")
    imdb_rating = Column(Text, nullable=False, default="")
    imdb_votes = Column(Text, nullable=False, default="")
    imdb_id = Column(Text, nullable=False, default="")
    type = Column(Text, nullable=False, default="")

    # Relationships
    cast = relationship(
        "Actor", back_populates="movie", cascade="all, delete-orphan", passive_deletes=True
    )

    def __repr__(self):
        return f"<Movie id={self.id} title={self.title!r}>"
