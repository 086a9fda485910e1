import pyarrow.compute as pc

from tidyground.compute import FunctionCallExpression, MeanAggregation, SumAggregation
from tidyground.dataframe import Dataframe, col

df = Dataframe.open_csv("data/colleges.csv") \
  .parse_number("tuition", integer=True) \
  .filter(FunctionCallExpression(pc.greater_equal, col("tuition"), 40000)) \
  .pivot_longer(["college", "state", "tuition"], name_pattern="cases_", name_column="year", value_column="cases") \
  .group_by("state", "year") \
  .summarize(cases=SumAggregation("cases"), mean_tuition=MeanAggregation("tuition"))

print(df)
print(df.show())
print(df.pivot_wider(["state"], name_column="year", value_column="cases", name_prefix="cases_").show())
