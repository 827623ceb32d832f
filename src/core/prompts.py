current_position_placeholder = "ma position actuelle"

trip_activities_prompt = """Je planifie un voyage à {destination} du {start_date} au {end_date}.
Je souhaite découvrir les activités suivantes dans un rayon de {radius_km}km :
1. Marchés (locaux, artisanaux)
2. Brocantes et vide-greniers (consulte spécifiquement vide-greniers.org pour cette zone et ces dates)
3. Événements locaux et culturels (consulte les agendas municipaux et les sites des mairies de la zone)
4. Escape games
5. Fêtes de village et festivals
6. Recycleries et ressourceries

Organise ta réponse jour par jour du {start_date} au {end_date}.
Pour chaque jour, liste les événements spécifiques ou les lieux ouverts qui correspondent à mes critères.
Sois précis sur les lieux, les horaires et cite tes sources si possible (liens vers vide-greniers.org ou sites de mairies).
Utilise des titres clairs pour chaque jour."""

no_activities_message = "Désolé, je n'ai pas trouvé d'activités pour cette période."

search_failed_message = "Une erreur est survenue lors de la recherche. Veuillez réessayer."
