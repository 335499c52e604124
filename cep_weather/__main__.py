from cep_weather.main import run

run()
