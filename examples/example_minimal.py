
import numpy as np
from geoestimpy import EstimationProblem, IDW, LWR, RegularGrid, georef, validate

# four samples on a 100 x 100 grid
data = georef({"y": [1.0, 0.0, 1.0, 0.0]}, [[25, 50, 75, 75], [25, 75, 50, 25]])
problem = EstimationProblem(data, RegularGrid(100, 100), "y")

idw = IDW(y={"neighbors": 3}).solve(problem)
lwr = LWR(y={"neighbors": 4}, on_degenerate="mean").solve(problem)

print("IDW range:", float(np.min(idw["y"])), float(np.max(idw["y"])))
print("LWR range:", float(np.min(lwr["y"])), float(np.max(lwr["y"])))
print(idw.to_dataframe().head())

# leave-one-out scores on a noisy parabola
x = np.linspace(0.0, 1.0, 100)
y = x ** 2 + np.random.default_rng(0).normal(0.0, 0.02, x.size)
print(validate(georef({"y": y}, x), LWR(y={"neighbors": 10})))
