# Hand-authored seed data; optional columns (language..type) are left empty.

# Presence of this title means the seed has already been loaded
SENTINEL_TITLE = "The Shawshank Redemption"

PREDEFINED_MOVIES = [
    {
        "title": "The Shawshank Redemption",
        "year": "1994",
        "rated": "R",
        "released": "14 Oct 1994",
        "runtime": "142 min",
        "genre": "Drama",
        "director": "Frank Darabont",
        "writer": "Stephen King, Frank Darabont",
        "actors": "Tim Robbins, Morgan Freeman, Bob Gunton",
        "plot": "Two imprisoned men bond over a number of years, finding solace and eventual "
                "redemption through acts of common decency.",
    },
    {
        "title": "The Godfather",
        "year": "1972",
        "rated": "R",
        "released": "24 Mar 1972",
        "runtime": "175 min",
        "genre": "Crime, Drama",
        "director": "Francis Ford Coppola",
        "writer": "Mario Puzo, Francis Ford Coppola",
        "actors": "Marlon Brando, Al Pacino, James Caan",
        "plot": "The aging patriarch of an organized crime dynasty transfers control of his "
                "clandestine empire to his reluctant son.",
    },
    {
        "title": "The Dark Knight",
        "year": "2008",
        "rated": "PG-13",
        "released": "18 Jul 2008",
        "runtime": "152 min",
        "genre": "Action, Crime, Drama",
        "director": "Christopher Nolan",
        "writer": "Jonathan Nolan, Christopher Nolan",
        "actors": "Christian Bale, Heath Ledger, Aaron Eckhart",
        "plot": "When the menace known as the Joker wreaks havoc and chaos on the people of "
                "Gotham, Batman must accept one of the greatest psychological and physical "
                "tests of his ability to fight injustice.",
    },
    {
        "title": "Pulp Fiction",
        "year": "1994",
        "rated": "R",
        "released": "14 Oct 1994",
        "runtime": "154 min",
        "genre": "Crime, Drama",
        "director": "Quentin Tarantino",
        "writer": "Quentin Tarantino, Roger Avary",
        "actors": "John Travolta, Uma Thurman, Samuel L. Jackson",
        "plot": "The lives of two mob hitmen, a boxer, a gangster and his wife, and a pair of "
                "diner bandits intertwine in four tales of violence and redemption.",
    },
    {
        "title": "Fight Club",
        "year": "1999",
        "rated": "R",
        "released": "15 Oct 1999",
        "runtime": "139 min",
        "genre": "Drama",
        "director": "David Fincher",
        "writer": "Chuck Palahniuk, Jim Uhls",
        "actors": "Brad Pitt, Edward Norton, Meat Loaf",
        "plot": "An insomniac office worker and a devil-may-care soapmaker form an underground "
                "fight club that evolves into something much, much more.",
    },
]
