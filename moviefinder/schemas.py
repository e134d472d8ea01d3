from typing import List
from pydantic import BaseModel, ConfigDict, Field

# ------------------------------------------------------------
# OMDb payloads. Field names are snake_case; aliases match the
# capitalized JSON keys. Absent string fields decode to "".
# ------------------------------------------------------------

class OmdbModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class FlaggedResponse(OmdbModel):
    response: str = Field("False", alias="Response")
    # Only present when Response == "False"
    error: str = Field("", alias="Error")

    @property
    def is_success(self) -> bool:
        """The API's own success flag, independent of HTTP status."""
        return self.response == "True"


class Rating(OmdbModel):
    source: str = Field("", alias="Source")
    value: str = Field("", alias="Value")


class MovieResponse(FlaggedResponse):
    title: str = Field("", alias="Title")
    year: str = Field("", alias="Year")
    rated: str = Field("", alias="Rated")
    released: str = Field("", alias="Released")
    runtime: str = Field("", alias="Runtime")
    genre: str = Field("", alias="Genre")
    director: str = Field("", alias="Director")
    writer: str = Field("", alias="Writer")
    actors: str = Field("", alias="Actors")
    plot: str = Field("", alias="Plot")
    language: str = Field("", alias="Language")
    country: str = Field("", alias="Country")
    awards: str = Field("", alias="Awards")
    poster: str = Field("", alias="Poster")
    ratings: List[Rating] = Field(default_factory=list, alias="Ratings")
    metascore: str = Field("", alias="Metascore")
    imdb_rating: str = Field("", alias="imdbRating")
    imdb_votes: str = Field("", alias="imdbVotes")
    imdb_id: str = Field("", alias="imdbID")
    type: str = Field("", alias="Type")


class SearchResult(OmdbModel):
    title: str = Field("", alias="Title")
    year: str = Field("", alias="Year")
    imdb_id: str = Field("", alias="imdbID")
    type: str = Field("", alias="Type")
    poster: str = Field("", alias="Poster")


class SearchResponse(FlaggedResponse):
    search: List[SearchResult] = Field(default_factory=list, alias="Search")
    total_results: str = Field("0", alias="totalResults")
