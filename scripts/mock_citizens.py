import numpy as np
import pandas as pd
from pathlib import Path

N_ROWS = 40

first = ["Amara", "Liam", "Sofia", "Noah", "Aisha", "Mateo", "Ingrid", "Kenji", "Chloe", "Ravi"]
last = ["Okafor", "Byrne", "Rossi", "Schmidt", "Khan", "Garcia", "Larsen", "Sato", "Martin", "Patel"]


def invoice_ids(n_rows):
    # Same keys as the committed config/data/citizens.csv: INV-1001, INV-1002, ...
    return [f"INV-{1001 + i}" for i in range(n_rows)]


def build_citizens(n_rows=N_ROWS, seed=7):
    rng = np.random.default_rng(seed)

    dob = pd.Timestamp("1950-01-01") + pd.to_timedelta(rng.integers(0, 55 * 365, size=n_rows), unit="D")
    registered = pd.Timestamp("2019-01-01") + pd.to_timedelta(rng.integers(0, 6 * 365 * 24 * 60, size=n_rows), unit="min")

    df = pd.DataFrame(
        {
            "invoice": invoice_ids(n_rows),
            "full_name": [f"{rng.choice(first)} {rng.choice(last)}" for _ in range(n_rows)],
            "gender": rng.choice(["F", "M"], size=n_rows),
            "date_of_birth": dob.strftime("%Y-%m-%d"),
            "household_id": rng.integers(100, 400, size=n_rows),
            "education_level": rng.choice(["Primary", "Secondary", "Diploma", "Bachelor", "Master", "Doctorate"], size=n_rows),
            "income": rng.integers(0, 9000, size=n_rows) * 10,
            "registered_at": registered.strftime("%Y-%m-%dT%H:%M:%S"),
        }
    )

    # One blank so the '-' placeholder shows up
    df.loc[rng.choice(n_rows, size=1, replace=False), "date_of_birth"] = None
    return df


if __name__ == "__main__":
    df = build_citizens()
    out_dir = Path("config") / "data"
    out_dir.mkdir(parents=True, exist_ok=True)
    df.to_csv(out_dir / "citizens.csv", index=False)
    print("wrote config/data/citizens.csv", df.shape)
