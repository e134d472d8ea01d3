from sqlalchemy import Column, Integer, Text, ForeignKey
from sqlalchemy.orm import relationship
from . import Base

class Actor(Base):
    __tablename__ = 'actors'

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(Text, nullable=False)
    movie_id = Column(Integer, ForeignKey('movies.id', ondelete="CASCADE"), nullable=False, index=True)

    # Relationships
    movie = relationship("Movie", back_populates="cast")

    def __repr__(self):
        return f"<Actor id={self.id} name={self.name!r} movie_id={self.movie_id}>"
