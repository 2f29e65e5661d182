"""Host adapters wiring the search engine into concrete UI toolkits."""
