from itertools import groupby
from typing import List
from moviefinder.models.movie import Movie
from moviefinder.models.actor import Actor
from moviefinder.schemas import MovieResponse, SearchResponse
from moviefinder.services.live_query import LiveQuery
from moviefinder.services.movie_store import MovieStore
from moviefinder.services.omdb_client import OmdbClient
from moviefinder.services.predefined_movies import PREDEFINED_MOVIES, SENTINEL_TITLE
from moviefinder.logger import get_logger

logger = get_logger()


class MovieService:
    """
    Coordinates the OMDb client and the local store.

    Upserts are keyed on exact title. Probe and writes are separate store
    calls with no lock around them, so two concurrent saves of one title can
    both insert; remove_duplicate_movies() collapses such pairs later.
    """

    def __init__(self, store: MovieStore, client: OmdbClient):
        self.store = store
        self.client = client

    # --- local database operations ---

    async def insert_movie(self, movie: Movie) -> int:
        return await self.store.insert_movie(movie)

    async def insert_movies(self, movies: List[Movie]) -> List[int]:
        return await self.store.insert_movies(movies)

    def get_all_movies(self) -> LiveQuery[List[Movie]]:
        return self.store.all_movies()

    def get_movies_by_actor_name(self, actor_name: str) -> LiveQuery[List[Movie]]:
        return self.store.movies_by_actor_name(actor_name)

    def get_movies_by_actor_name_enhanced(self, actor_name: str) -> LiveQuery[List[Movie]]:
        return self.store.movies_by_actor_name_enhanced(actor_name)

    def get_movies_by_title_part(self, title_part: str) -> LiveQuery[List[Movie]]:
        return self.store.movies_by_title_part(title_part)

    async def get_movie_by_title(self, title: str) -> Movie | None:
        return await self.store.get_movie_by_title(title)

    def get_actors_for_movie(self, movie_id: int) -> LiveQuery[List[Actor]]:
        return self.store.actors_by_movie_id(movie_id)

    def get_actors_by_name(self, name: str) -> LiveQuery[List[Actor]]:
        return self.store.actors_by_name(name)

    # --- actor reconciliation ---

    async def _save_actors_for_movie(self, movie_id: int, actors_csv: str) -> int:
        """Adds the names in `actors_csv` the movie doesn't already have, ignoring case."""
        existing = await self.store.actors_by_movie_id_snapshot(movie_id)
        known = {actor.name.lower() for actor in existing}

        new_actors = []
        for name in (piece.strip() for piece in actors_csv.split(",")):
            if not name or name.lower() in known:
                continue
            # Also rejects case-variants repeated within the same CSV
            known.add(name.lower())
            new_actors.append(Actor(name=name, movie_id=movie_id))

        if new_actors:
            await self.store.insert_actors(new_actors)
            logger.debug(f"Added {len(new_actors)} actor(s) to movie {movie_id}")
        return len(new_actors)

    async def insert_movie_with_actors(self, movie: Movie) -> int:
        """Saves a movie unless its title is already stored, then reconciles its actors."""
        existing = await self.store.get_movie_by_title(movie.title)
        if existing:
            logger.info(f"ℹ️ Movie '{movie.title}' already exists (id={existing.id}), merging actors only.")
            await self._save_actors_for_movie(existing.id, movie.actors)
            return existing.id

        movie_id = await self.store.insert_movie(movie)
        await self._save_actors_for_movie(movie_id, movie.actors)
        logger.info(f"✅ Saved movie '{movie.title}' (id={movie_id}).")
        return movie_id

    # --- remote API operations ---

    async def fetch_movie_by_title(self, title: str) -> MovieResponse:
        return await self.client.fetch_by_title(title)

    async def search_movies(self, search_term: str, page: int = 1) -> SearchResponse:
        return await self.client.search(search_term, page)

    async def save_movie_from_response(self, response: MovieResponse) -> int:
        """Saves an OMDb detail response through the same title upsert as local inserts."""
        existing = await self.store.get_movie_by_title(response.title)
        if existing:
            logger.info(f"ℹ️ Movie '{response.title}' already exists (id={existing.id}), merging actors only.")
            await self._save_actors_for_movie(existing.id, response.actors)
            return existing.id

        movie_id = await self.store.insert_movie(self.map_response_to_entity(response))
        await self._save_actors_for_movie(movie_id, response.actors)
        logger.info(f"✅ Saved movie '{response.title}' from OMDb (id={movie_id}).")
        return movie_id

    @staticmethod
    def map_response_to_entity(response: MovieResponse) -> Movie:
        return Movie(
            title=response.title,
            year=response.year,
            rated=response.rated,
            released=response.released,
            runtime=response.runtime,
            genre=response.genre,
            director=response.director,
            writer=response.writer,
            actors=response.actors,
            plot=response.plot,
            language=response.language,
            country=response.country,
            awards=response.awards,
            poster=response.poster,
            imdb_rating=response.imdb_rating,
            imdb_votes=response.imdb_votes,
            imdb_id=response.imdb_id,
            type=response.type,
        )

    # --- seed data and maintenance ---

    async def add_predefined_movies_if_not_exists(self) -> bool:
        """Seeds the predefined movies once; returns True if seeding ran."""
        if await self.store.get_movie_by_title(SENTINEL_TITLE):
            logger.info("ℹ️ Predefined movies already present, skipping seed.")
            return False
        await self.add_predefined_movies()
        return True

    async def add_predefined_movies(self) -> List[int]:
        ids = []
        for data in PREDEFINED_MOVIES:
            ids.append(await self.insert_movie_with_actors(Movie(**data)))
        logger.info(f"Seeded {len(ids)} predefined movies")
        return ids

    async def remove_duplicate_movies(self) -> int:
        """Keeps the first movie per exact title and deletes the rest. Returns the count removed."""
        movies = await self.store.all_movies_snapshot()

        removed = 0
        by_title = sorted(movies, key=lambda m: m.title)  # stable: keeps storage order per title
        for title, group in groupby(by_title, key=lambda m: m.title):
            keep, *duplicates = list(group)
            for movie in duplicates:
                # Actors first; must not depend on the FK cascade being enabled
                await self.store.delete_actors_by_movie_id(movie.id)
                await self.store.delete_movie(movie.id)
                removed += 1
            if duplicates:
                logger.info(f"Removed {len(duplicates)} duplicate(s) of '{title}', kept id={keep.id}")

        logger.info(f"Removed {removed} duplicate movies")
        return removed
