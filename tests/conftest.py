import matplotlib

matplotlib.use("Agg")  # charts in experiments tests must not need a display
