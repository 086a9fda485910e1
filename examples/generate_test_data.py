import os
import csv
import random

if not os.path.exists("data"):
    os.mkdir("data")

if not os.path.exists("data/colleges.csv"):
  # Covid cases reported by colleges, one column per reporting period
  states = {"IL": ["Chicago", "Evanston", "Urbana"], "MA": ["Boston", "Cambridge"], "NY": ["Ithaca", "Albany"]}
  colleges = []
  for state, cities in states.items():
    for city in cities:
      for i in range(5):
        total = random.randint(0, 2000)
        cases_2021 = random.randint(0, total)
        tuition = f"${random.randint(20, 65)},{random.choice(['000', '500'])}"
        colleges.append([f"{city} College {i+1}", state, total, cases_2021, tuition])

  with open('data/colleges.csv', 'w', newline='') as f:
    writer = csv.writer(f)
    writer.writerow(["college", "state", "cases_total", "cases_2021", "tuition"])
    writer.writerows(colleges)
