from typing import List, Optional
from sqlalchemy import delete, or_, select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from moviefinder.models.movie import Movie
from moviefinder.models.actor import Actor
from moviefinder.services.live_query import InvalidationTracker, LiveQuery
from moviefinder.logger import get_logger

logger = get_logger()

MOVIES = Movie.__tablename__
ACTORS = Actor.__tablename__


def _with_column_defaults(movie: Movie) -> Movie:
    """Fills unset columns with their defaults so a same-id merge replaces every column."""
    for column in Movie.__table__.columns:
        if column.default is not None and getattr(movie, column.key) is None:
            setattr(movie, column.key, column.default.arg)
    return movie


class MovieStore:
    """
    Local persistence for movies and their actors.

    Every operation runs in its own session. Writes commit before notifying
    the tracker, so live queries only ever observe committed rows.
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession],
                 tracker: Optional[InvalidationTracker] = None):
        self._session_factory = session_factory
        self.tracker = tracker or InvalidationTracker()

    def _live(self, tables, query) -> LiveQuery:
        return LiveQuery(self.tracker, tables, query)

    async def _fetch_all(self, stmt) -> list:
        async with self._session_factory() as session:
            result = await session.execute(stmt)
            return list(result.scalars().all())

    async def _fetch_first(self, stmt):
        async with self._session_factory() as session:
            result = await session.execute(stmt.limit(1))
            return result.scalars().first()

    async def _execute_write(self, stmt, *tables: str):
        async with self._session_factory() as session:
            await session.execute(stmt)
            await session.commit()
        self.tracker.notify(*tables)

    # --- movies ---

    async def insert_movie(self, movie: Movie) -> int:
        """Inserts a movie, replacing the row with the same id if one exists."""
        async with self._session_factory() as session:
            merged = await session.merge(_with_column_defaults(movie))
            await session.commit()
            movie_id = merged.id
        self.tracker.notify(MOVIES)
        return movie_id

    async def insert_movies(self, movies: List[Movie]) -> List[int]:
        """Batch version of insert_movie, committed as one transaction."""
        async with self._session_factory() as session:
            merged = [await session.merge(_with_column_defaults(movie)) for movie in movies]
            await session.commit()
            ids = [m.id for m in merged]
        if ids:
            self.tracker.notify(MOVIES)
        return ids

    async def get_movie_by_id(self, movie_id: int) -> Optional[Movie]:
        async with self._session_factory() as session:
            return await session.get(Movie, movie_id)

    async def get_movie_by_title(self, title: str) -> Optional[Movie]:
        """Exact, case-sensitive title match."""
        return await self._fetch_first(
            select(Movie).where(Movie.title == title).order_by(Movie.id)
        )

    async def all_movies_snapshot(self) -> List[Movie]:
        return await self._fetch_all(select(Movie).order_by(Movie.id))

    def all_movies(self) -> LiveQuery[List[Movie]]:
        return self._live({MOVIES}, self.all_movies_snapshot)

    def movies_by_actor_name(self, actor_name: str) -> LiveQuery[List[Movie]]:
        """Case-insensitive substring match on the comma-joined actors column."""
        stmt = (
            select(Movie)
            .where(Movie.actors.icontains(actor_name, autoescape=True))
            .order_by(Movie.id)
        )
        return self._live({MOVIES}, lambda: self._fetch_all(stmt))

    def movies_by_actor_name_enhanced(self, actor_name: str) -> LiveQuery[List[Movie]]:
        """Matches the actors column or any linked Actor row."""
        stmt = (
            select(Movie)
            .outerjoin(Actor, Actor.movie_id == Movie.id)
            .where(or_(
                Movie.actors.icontains(actor_name, autoescape=True),
                Actor.name.icontains(actor_name, autoescape=True),
            ))
            .distinct()
            .order_by(Movie.id)
        )
        return self._live({MOVIES, ACTORS}, lambda: self._fetch_all(stmt))

    def movies_by_title_part(self, title_part: str) -> LiveQuery[List[Movie]]:
        stmt = (
            select(Movie)
            .where(Movie.title.icontains(title_part, autoescape=True))
            .order_by(Movie.id)
        )
        return self._live({MOVIES}, lambda: self._fetch_all(stmt))

    async def delete_movie(self, movie_id: int):
        """Deletes a movie; its actor rows go with it via ON DELETE CASCADE."""
        await self._execute_write(delete(Movie).where(Movie.id == movie_id), MOVIES, ACTORS)

    # --- actors ---

    async def insert_actor(self, actor: Actor) -> int:
        async with self._session_factory() as session:
            merged = await session.merge(actor)
            await session.commit()
            actor_id = merged.id
        self.tracker.notify(ACTORS)
        return actor_id

    async def insert_actors(self, actors: List[Actor]):
        if not actors:
            return
        async with self._session_factory() as session:
            for actor in actors:
                await session.merge(actor)
            await session.commit()
        self.tracker.notify(ACTORS)

    async def actors_by_movie_id_snapshot(self, movie_id: int) -> List[Actor]:
        return await self._fetch_all(
            select(Actor).where(Actor.movie_id == movie_id).order_by(Actor.id)
        )

    def actors_by_movie_id(self, movie_id: int) -> LiveQuery[List[Actor]]:
        return self._live({ACTORS}, lambda: self.actors_by_movie_id_snapshot(movie_id))

    def actors_by_name(self, name: str) -> LiveQuery[List[Actor]]:
        stmt = (
            select(Actor)
            .where(Actor.name.icontains(name, autoescape=True))
            .order_by(Actor.id)
        )
        return self._live({ACTORS}, lambda: self._fetch_all(stmt))

    async def delete_actors_by_movie_id(self, movie_id: int):
        await self._execute_write(delete(Actor).where(Actor.movie_id == movie_id), ACTORS)
