from moviefinder.viewmodels.ui_state import Initial, Loading, Success, SaveSuccess, Error, UiState
from moviefinder.viewmodels.base import ViewModel
from moviefinder.viewmodels.main import MainViewModel
from moviefinder.viewmodels.add_movies import AddMoviesViewModel
from moviefinder.viewmodels.search_movies import SearchMoviesViewModel
from moviefinder.viewmodels.search_movies_by_title import SearchMoviesByTitleViewModel
from moviefinder.viewmodels.search_actors import SearchActorsViewModel

__all__ = [
    "Initial",
    "Loading",
    "Success",
    "SaveSuccess",
    "Error",
    "UiState",
    "ViewModel",
    "MainViewModel",
    "AddMoviesViewModel",
    "SearchMoviesViewModel",
    "SearchMoviesByTitleViewModel",
    "SearchActorsViewModel",
]
