import asyncio
import pytest
from moviefinder.schemas import MovieResponse, SearchResponse, SearchResult
from moviefinder.services import NetworkError
from moviefinder.viewmodels import (
    AddMoviesViewModel,
    Error,
    Initial,
    Loading,
    MainViewModel,
    SaveSuccess,
    SearchActorsViewModel,
    SearchMoviesByTitleViewModel,
    SearchMoviesViewModel,
    Success,
)
from conftest import build_movie, wait_for_state

INCEPTION = MovieResponse(Title="Inception", Year="2010", Actors="Leonardo DiCaprio, Elliot Page", Response="True")


def record_states(view_model):
    states = []
    view_model.observe(states.append)
    return states


async def test_search_movie_with_blank_title_fails_without_calling_api(service, omdb):
    vm = SearchMoviesViewModel(service)
    vm.update_search_title("   ")

    assert vm.search_movie() is None
    assert vm.state == Error("Please enter a movie title")
    assert omdb.calls == []


async def test_search_movie_goes_through_loading_to_success(service, omdb):
    omdb.details["Inception"] = INCEPTION
    vm = SearchMoviesViewModel(service)
    states = record_states(vm)
    vm.update_search_title("Inception")

    await vm.search_movie()

    assert states == [Loading(), Success(INCEPTION)]


async def test_search_movie_not_found(service):
    vm = SearchMoviesViewModel(service)
    vm.update_search_title("zzqqxx123")

    await vm.search_movie()

    assert vm.state == Error("Movie not found")


async def test_search_movie_surfaces_exception_message(service, omdb):
    omdb.error = NetworkError("connection refused")
    vm = SearchMoviesViewModel(service)
    vm.update_search_title("Inception")

    await vm.search_movie()

    assert vm.state == Error("connection refused")


async def test_exception_without_message_uses_fallback(service, omdb):
    omdb.error = asyncio.TimeoutError()
    vm = SearchMoviesViewModel(service)
    vm.update_search_title("Inception")

    await vm.search_movie()

    assert vm.state == Error("Unknown error occurred")


async def test_save_after_success_persists_and_reports(service, store, omdb):
    omdb.details["Inception"] = INCEPTION
    vm = SearchMoviesViewModel(service)
    vm.update_search_title("Inception")
    await vm.search_movie()

    await vm.save_movie_to_database()

    assert vm.state == SaveSuccess(INCEPTION)
    movie = await store.get_movie_by_title("Inception")
    assert [a.name for a in await store.actors_by_movie_id_snapshot(movie.id)] == ["Leonardo DiCaprio", "Elliot Page"]


async def test_save_is_ignored_without_a_loaded_movie(service, store):
    vm = SearchMoviesViewModel(service)

    assert vm.save_movie_to_database() is None
    assert vm.state == Initial()
    assert await store.all_movies_snapshot() == []


async def test_save_failure_uses_save_fallback_message(service, omdb, monkeypatch):
    omdb.details["Inception"] = INCEPTION
    vm = SearchMoviesViewModel(service)
    vm.update_search_title("Inception")
    await vm.search_movie()

    async def broken_save(response):
        raise RuntimeError()

    monkeypatch.setattr(service, "save_movie_from_response", broken_save)
    await vm.save_movie_to_database()

    assert vm.state == Error("Failed to save movie")


async def test_retry_reuses_the_original_title(service, omdb):
    omdb.error = NetworkError("connection refused")
    vm = SearchMoviesViewModel(service)
    vm.update_search_title("Inception")
    await vm.search_movie()

    vm.update_search_title("Something else")
    omdb.error = None
    omdb.details["Inception"] = INCEPTION
    await vm.retry()

    assert vm.state == Success(INCEPTION)
    assert omdb.calls == [("fetch_by_title", "Inception"), ("fetch_by_title", "Inception")]


async def test_retry_without_previous_action_does_nothing(service):
    vm = SearchMoviesViewModel(service)

    assert vm.retry() is None
    assert vm.state == Initial()


async def test_title_search_success_carries_results(service, omdb):
    results = [SearchResult(Title="Dune", Year="2021"), SearchResult(Title="Dune", Year="1984")]
    omdb.searches["dune"] = SearchResponse(Search=results, Response="True")
    vm = SearchMoviesByTitleViewModel(service)
    vm.update_search_term("dune")

    await vm.search_movies_by_title()

    assert vm.state == Success(results)


async def test_title_search_without_results_reports_and_writes_nothing(service, store):
    vm = SearchMoviesByTitleViewModel(service)
    vm.update_search_term("zzqqxx123")

    await vm.search_movies_by_title()

    assert vm.state == Error("No movies found with this title")
    assert await store.all_movies_snapshot() == []


async def test_title_search_with_blank_term(service, omdb):
    vm = SearchMoviesByTitleViewModel(service)

    assert vm.search_movies_by_title() is None
    assert vm.state == Error("Please enter a search term")
    assert omdb.calls == []


async def test_actor_search_with_blank_name(service):
    vm = SearchActorsViewModel(service)
    vm.update_search_term("")

    assert vm.search_actors() is None
    assert vm.state == Error("Please enter an actor name")


async def test_actor_search_without_matches(service):
    vm = SearchActorsViewModel(service)
    vm.update_search_term("Nobody")

    vm.search_actors()
    state = await wait_for_state(vm, lambda s: isinstance(s, Error))

    assert state == Error("No movies found with this actor")
    vm.close()


async def test_actor_search_reemits_after_later_writes(service, store):
    await store.insert_movie(build_movie("Heat", actors="Al Pacino, Robert De Niro"))
    vm = SearchActorsViewModel(service)
    vm.update_search_term("de niro")

    vm.search_actors()
    first = await wait_for_state(vm, lambda s: isinstance(s, Success))
    assert [m.title for m in first.payload] == ["Heat"]

    await store.insert_movie(build_movie("Ronin", actors="Robert De Niro, Jean Reno"))
    second = await wait_for_state(vm, lambda s: isinstance(s, Success) and len(s.payload) == 2)

    assert [m.title for m in second.payload] == ["Heat", "Ronin"]
    vm.close()


async def test_new_actor_search_replaces_the_previous_one(service, store):
    await store.insert_movie(build_movie("Heat", actors="Al Pacino"))
    vm = SearchActorsViewModel(service)
    vm.update_search_term("pacino")
    first = vm.search_actors()
    await wait_for_state(vm, lambda s: isinstance(s, Success))

    vm.update_search_term("reno")
    vm.search_actors()
    await wait_for_state(vm, lambda s: isinstance(s, Error))
    await asyncio.sleep(0)

    assert first.cancelled()
    assert store.tracker.observer_count("movies") == 1
    vm.close()


async def test_add_movies_reports_whether_seeding_ran(service):
    vm = AddMoviesViewModel(service)
    states = record_states(vm)

    await vm.add_predefined_movies()
    await vm.add_predefined_movies()

    assert states == [Loading(), Success(True), Loading(), Success(False)]


async def test_main_view_model_tracks_movie_count(service, store):
    await store.insert_movie(build_movie("Heat"))
    vm = MainViewModel(service)

    vm.start()
    await asyncio.wait_for(vm.ready.wait(), 2)
    assert vm.movie_count == 1

    await store.insert_movie(build_movie("Ronin"))
    await wait_for_state(vm, lambda s: s == Success(2))

    assert vm.movie_count == 2
    vm.close()


async def test_unsubscribed_observer_is_not_called(service):
    vm = SearchMoviesViewModel(service)
    states = []
    unsubscribe = vm.observe(states.append)

    unsubscribe()
    vm.search_movie()

    assert states == []


async def test_close_cancels_running_tasks(service, store):
    vm = MainViewModel(service)
    task = vm.start()
    await asyncio.wait_for(vm.ready.wait(), 2)

    vm.close()
    with pytest.raises(asyncio.CancelledError):
        await task

    assert store.tracker.observer_count("movies") == 0


async def test_actor_search_skips_results_that_did_not_change(service, store):
    await store.insert_movie(build_movie("Heat", actors="Al Pacino"))
    vm = SearchActorsViewModel(service)
    states = record_states(vm)
    vm.update_search_term("pacino")
    vm.search_actors()
    await wait_for_state(vm, lambda s: isinstance(s, Success))

    await store.insert_movie(build_movie("Alien", actors="Sigourney Weaver"))
    await store.insert_movie(build_movie("Aliens", actors="Sigourney Weaver"))
    await asyncio.sleep(0.1)

    assert [type(s) for s in states] == [Loading, Success]
    vm.close()


async def test_live_actor_search_expires(service, store):
    await store.insert_movie(build_movie("Heat", actors="Al Pacino"))
    vm = SearchActorsViewModel(service, live_for=0.3)
    vm.update_search_term("pacino")

    collector = vm.search_actors()
    await asyncio.wait_for(collector, 2)

    assert not vm.is_live
    assert isinstance(vm.state, Success)
    assert store.tracker.observer_count("movies") == 0


async def test_stop_keeps_the_last_result(service, store):
    await store.insert_movie(build_movie("Heat", actors="Al Pacino"))
    vm = SearchActorsViewModel(service)
    vm.update_search_term("pacino")
    vm.search_actors()
    state = await wait_for_state(vm, lambda s: isinstance(s, Success))

    vm.stop()
    await asyncio.sleep(0.05)

    assert vm.state == state
    assert store.tracker.observer_count("movies") == 0
