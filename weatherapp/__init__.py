# ABOUTME: Weather data layer: OpenWeatherMap fetches, city-name normalization and daily aggregation.
# ABOUTME: UI code imports WeatherBoard from weatherapp.board and reads results from its WeatherStore.
