import requests
import sys

BASE_URL = "http://localhost:5001/api"

def get_first_city():
    try:
        response = requests.get(f"{BASE_URL}/cities", timeout=10)
        if response.status_code == 200:
            data = response.json()
            if len(data) > 0:
                print(f"Found city: {data[0]['name']} ({data[0]['lat']}, {data[0]['lon']})")
                return data[0]
    except Exception as e:
        print(f"Error fetching cities: {e}")
    return {"name": "Tromsø, NO", "lat": 69.6492, "lon": 18.9553}

def check_aurora_endpoint(city):
    url = f"{BASE_URL}/aurora"
    try:
        print(f"Testing endpoint: {url} for {city['name']}")
        response = requests.get(url, params={"lat": city["lat"], "lon": city["lon"]}, timeout=60)
        data = response.json()
        if response.status_code == 200:
            print(f"Success! Probability {data['probability']}%, visibility {data['visibility']}")
            print("Cloud:", data["cloud"])
            print("Dark:", data["dark"])
            print("Kp:", data["kp"])
            return True
        print(f"Failed with status {response.status_code}: {data}")
    except Exception as e:
        print(f"Error: {e}")
    return False

def check_space_weather_endpoint():
    url = f"{BASE_URL}/spaceweather"
    try:
        print(f"Testing endpoint: {url}")
        response = requests.get(url, timeout=60)
        if response.status_code == 200:
            print("Solar wind:", response.json())
            return True
        print(f"Failed with status {response.status_code}: {response.text}")
    except Exception as e:
        print(f"Error: {e}")
    return False

if __name__ == "__main__":
    ok = check_aurora_endpoint(get_first_city())
    ok = check_space_weather_endpoint() and ok
    sys.exit(0 if ok else 1)
